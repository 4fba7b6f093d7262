"""Application composition: runtime settings shared by the web entrypoint."""
