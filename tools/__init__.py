"""Developer tools: the subprocess benchmark."""
