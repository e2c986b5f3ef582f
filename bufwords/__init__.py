"""bufwords — word completion from the open buffer, served over LSP."""

__version__ = "0.1.0"
