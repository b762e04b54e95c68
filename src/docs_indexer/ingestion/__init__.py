"""
Ingestion: acquiring, reading, chunking, and embedding documentation.

Everything up to the point where chunk records are ready for the vector
store lives here: the git working copy, Markdown discovery, the recursive
splitter, content-hash chunk ids, and the optional embedding provider.
"""
