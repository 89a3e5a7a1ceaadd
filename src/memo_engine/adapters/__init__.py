"""Host adapters translating UI toolkits to engine calls."""
