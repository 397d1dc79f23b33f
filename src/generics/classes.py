"""Class hierarchy registry

    ClassNode -- an immutable class definition: name, parents, sealed flag

    ClassRegistry -- the set of defined classes, answering inheritance
        distance and ancestry queries

Distances are measured in parent hops, taking the shortest route when
multiple inheritance offers more than one.  A class is at distance 0 from
itself, whether or not it has been registered.
"""

import logging
from _thread import allocate_lock
from weakref import WeakKeyDictionary

from zope.interface import implementer

from generics.interfaces import *

__all__ = ['ClassNode', 'ClassRegistry']

log = logging.getLogger(__name__)

RESERVED = (ANY, MISSING)


@implementer(IClassNode)
class ClassNode(object):

    """A named class and its ordered parents"""

    __slots__ = 'name', 'parents', 'sealed'

    def __init__(self, name, parents=(), sealed=False):
        self.name = name
        self.parents = tuple(parents)
        self.sealed = bool(sealed)

    def __eq__(self,other):
        return type(self) is type(other) and self.name==other.name and \
            self.parents==other.parents and self.sealed==other.sealed

    def __ne__(self,other):
        return not self.__eq__(other)

    def __hash__(self):
        return hash((self.name, self.parents, self.sealed))

    def __repr__(self):
        if self.sealed:
            return "ClassNode(%r, %r, sealed=True)" % (self.name, self.parents)
        return "ClassNode(%r, %r)" % (self.name, self.parents)












@implementer(IClassRegistry)
class ClassRegistry(object):

    """Registry of classes, with multiple inheritance"""

    def __init__(self):
        self.__lock = allocate_lock()
        self.__subscribers = WeakKeyDictionary()
        self.__nodes = {}
        self.__closures = {}

    def register(self, name, parents=(), sealed=False):
        node = ClassNode(name, parents, sealed)

        self.__lock.acquire()
        try:
            old = self.__nodes.get(name)
            self._checkNode(node, old)
            self.__nodes[name] = node
            self.__closures.clear()
        finally:
            self.__lock.release()

        if old is None:
            log.debug("Defined class %r with parents %r", name, node.parents)
        else:
            log.debug("Redefined class %r: parents %r -> %r",
                name, old.parents, node.parents)

        self._notify(name)
        return old


    def _checkNode(self, node, old):
        """Raise an error if 'node' can't replace 'old' (lock must be held)"""

        name = node.name
        if name in RESERVED:
            raise UnknownClassError("%r is a reserved class name" % (name,))

        if old is not None and old.sealed:
            raise SealedClassError("%r is sealed; it can't be redefined" % (name,))

        for parent in node.parents:
            if parent==name:
                raise CycleError("%r can't inherit from itself" % (name,))
            if parent in RESERVED or parent not in self.__nodes:
                raise UnknownClassError(
                    "Undefined parent class %r for %r" % (parent, name)
                )
            if name in self._ancestors(parent):
                raise CycleError(
                    "%r would become an ancestor of itself through %r"
                    % (name, parent)
                )


    def unregister(self, name):
        """Remove class 'name', returning its node"""

        self.__lock.acquire()
        try:
            node = self.__nodes.get(name)
            if node is None:
                raise UnknownClassError("Undefined class %r" % (name,))
            if node.sealed:
                raise SealedClassError("%r is sealed; it can't be removed" % (name,))
            children = sorted(
                [n.name for n in self.__nodes.values() if name in n.parents]
            )
            if children:
                raise RegistrationError(
                    "%r still has subclasses: %s" % (name, ', '.join(children))
                )
            del self.__nodes[name]
            self.__closures.clear()
        finally:
            self.__lock.release()

        log.debug("Removed class %r", name)
        self._notify(name)
        return node


    def clear(self):
        self.__lock.acquire()
        try:
            self.__nodes.clear()
            self.__closures.clear()
        finally:
            self.__lock.release()
        self._notify(None)









    def _ancestors(self, name):
        """Breadth-first walk of parents, recording the first (shortest) hop"""

        try:
            return self.__closures[name]
        except KeyError:
            pass

        closure = {name: 0}
        frontier = [name]
        depth = 0
        nodes = self.__nodes

        while frontier:
            depth += 1
            next_frontier = []
            for klass in frontier:
                node = nodes.get(klass)
                if node is None:
                    continue
                for parent in node.parents:
                    if parent not in closure:
                        closure[parent] = depth
                        next_frontier.append(parent)
            frontier = next_frontier

        self.__closures[name] = closure
        return closure


    def ancestors(self, name):
        self.__lock.acquire()
        try:
            return dict(self._ancestors(name))
        finally:
            self.__lock.release()


    def distance(self, fromClass, toClass):
        if fromClass==toClass:
            return 0
        self.__lock.acquire()
        try:
            return self._ancestors(fromClass).get(toClass, INFINITY)
        finally:
            self.__lock.release()


    def isAncestor(self, fromClass, toClass):
        return self.distance(fromClass, toClass) != INFINITY


    def superclasses(self, name):
        """List the strict ancestors of 'name', nearest first"""
        items = [(d,k) for k,d in self.ancestors(name).items() if k!=name]
        items.sort()
        return [k for d,k in items]








    def get(self, name, default=None):
        return self.__nodes.get(name, default)

    def __getitem__(self, name):
        try:
            return self.__nodes[name]
        except KeyError:
            raise UnknownClassError("Undefined class %r" % (name,))

    def __contains__(self, name):
        return name in self.__nodes

    def __iter__(self):
        return iter(sorted(self.__nodes))

    def __len__(self):
        return len(self.__nodes)


    def subscribe(self, listener):
        self.__lock.acquire()
        try:
            self.__subscribers[listener] = 1
        finally:
            self.__lock.release()

    def unsubscribe(self, listener):
        self.__lock.acquire()
        try:
            if listener in self.__subscribers:
                del self.__subscribers[listener]
        finally:
            self.__lock.release()

    def _notify(self, name):
        # Called without the lock held, so that listeners may query us
        self.__lock.acquire()
        try:
            listeners = list(self.__subscribers.keys())
        finally:
            self.__lock.release()

        for listener in listeners:
            listener.classChanged(name)
