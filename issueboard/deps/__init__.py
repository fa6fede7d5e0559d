# Marks `issueboard.deps` as a real package so imports like
# `from issueboard.deps.store import get_store` work reliably.
