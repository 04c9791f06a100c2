from __future__ import annotations

# GitHub REST API requests
GITHUB_HTTP_TIMEOUT_SECONDS = 30.0

# Upper bound for the parallel I/O batches (manifest bumps, changed-file lookups)
MAX_PARALLEL_IO = 8
