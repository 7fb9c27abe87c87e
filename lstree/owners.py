"""
Owner and group name resolution.

Looking a uid up in the user database reads a file on every call, and a
tree usually repeats the same few owners thousands of times. Lookups are
memoized in an LRU cache; ids without an entry (or platforms without a
user database) fall back to the number itself.
"""

import threading

from cachetools import LRUCache, cached

try:
    import grp
    import pwd
except ImportError:  # Windows has no user database
    grp = None
    pwd = None

CACHE_SIZE = 4096

_lock = threading.Lock()


@cached(cache=LRUCache(maxsize=CACHE_SIZE), lock=_lock)
def user_name(uid: int) -> str:
    """Return the login name for uid, or the uid as a string."""
    if pwd is None:
        return str(uid)
    try:
        return pwd.getpwuid(uid).pw_name
    except KeyError:
        return str(uid)


@cached(cache=LRUCache(maxsize=CACHE_SIZE), lock=_lock)
def group_name(gid: int) -> str:
    """Return the group name for gid, or the gid as a string."""
    if grp is None:
        return str(gid)
    try:
        return grp.getgrgid(gid).gr_name
    except KeyError:
        return str(gid)
