"""Wire encoding of primitive elements, variable length values, block headers and inventory vectors."""