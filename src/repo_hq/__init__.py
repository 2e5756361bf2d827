"""repo-hq: manage local clones of remote repositories."""
