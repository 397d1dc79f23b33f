"""Memo of dispatch outcomes"""

from _thread import allocate_lock

from zope.interface import implementer

from generics.interfaces import IResultCache

__all__ = ['ResultCache', 'CacheEntry']


class CacheEntry(tuple):

    """'(method,competitors)' outcome of resolving one class tuple"""

    __slots__ = ()

    def __new__(cls, method, competitors=()):
        return tuple.__new__(cls, (method, tuple(competitors)))

    method      = property(lambda self: self[0])
    competitors = property(lambda self: self[1])

    def isAmbiguous(self):
        return bool(self[1])


@implementer(IResultCache)
class ResultCache(object):

    """Thread-safe mapping from concrete class tuples to 'CacheEntry'"""

    def __init__(self):
        self.__lock = allocate_lock()
        self.__data = {}
        self.hits = self.misses = 0

    def get(self, key, default=None):
        self.__lock.acquire()
        try:
            try:
                entry = self.__data[key]
            except KeyError:
                self.misses += 1
                return default
            self.hits += 1
            return entry
        finally:
            self.__lock.release()

    def set(self, key, entry):
        self.__lock.acquire()
        try:
            self.__data[key] = entry
        finally:
            self.__lock.release()

    def clear(self):
        self.__lock.acquire()
        try:
            self.__data.clear()
        finally:
            self.__lock.release()

    def __contains__(self, key):
        return key in self.__data

    def __len__(self):
        return len(self.__data)

    def __repr__(self):
        return "<ResultCache: %d entries, %d hits, %d misses>" % (
            len(self.__data), self.hits, self.misses
        )
