"""Built-in ``codeflow`` sub-commands."""
