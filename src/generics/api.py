"""Class, Generic, and Method Definition API

The module-level functions operate on a process-wide 'Environment' that
starts out empty at import time; 'reset()' empties it again.  Create
separate 'Environment' instances for independent dispatch universes.
"""

__all__ = [
    'Environment', 'defineClass', 'defineGeneric', 'defineMethod',
    'dispatch', 'callNext', 'selectMethod', 'existsMethod', 'hasMethod',
    'removeMethod', 'is_a', 'reset', 'getEnvironment',
]

import logging

from generics.interfaces import *
from generics.classes import ClassRegistry
from generics.functions import MethodTable

log = logging.getLogger(__name__)


class Environment(object):

    """A class registry plus the generic functions dispatching over it"""

    def __init__(self, registry=None, table=None, method_combiner=None):
        if registry is None:
            registry = ClassRegistry()
        if table is None:
            table = MethodTable(registry, method_combiner)
        self.registry = registry
        self.table = table


    def defineClass(self, name, parents=(), sealed=False):
        """Define (or redefine) class 'name', returning its name"""
        if isinstance(parents,str):
            parents = (parents,)
        self.registry.register(name, parents, sealed)
        return name

    def defineGeneric(self, name, paramNames):
        """Define generic 'name' dispatching on 'paramNames'; return it"""
        return self.table.registerGeneric(name, paramNames)

    def defineMethod(self, genericName, classTuple, handler):
        """Register 'handler' for 'classTuple'; return the new 'Method'"""
        return self.table.registerMethod(genericName, classTuple, handler)

    def removeMethod(self, genericName, classTuple):
        return self.table.removeMethod(genericName, classTuple)


    def dispatch(self, genericName, concreteClassTuple, callArgs=(), callKw=None):
        """Invoke the best method of 'genericName' for 'concreteClassTuple'"""
        dispatcher = self.table.getGeneric(genericName).dispatcher
        return dispatcher.dispatch(concreteClassTuple, tuple(callArgs), callKw)

    def callNext(self, currentMethod, concreteClassTuple, callArgs=(), callKw=None):
        """Invoke the method that follows 'currentMethod' in precedence"""
        dispatcher = self.table.getGeneric(currentMethod.generic).dispatcher
        return dispatcher.callNext(
            currentMethod, concreteClassTuple, tuple(callArgs), callKw
        )


    def selectMethod(self, genericName, classTuple):
        """Return the 'Method' that would be dispatched for 'classTuple'"""
        dispatcher = self.table.getGeneric(genericName).dispatcher
        return dispatcher.resolve(classTuple).method

    def existsMethod(self, genericName, classTuple):
        """True if a method is defined for exactly 'classTuple'"""
        return self.table.getMethod(genericName, classTuple) is not None

    def hasMethod(self, genericName, classTuple):
        """True if some method (possibly inherited) applies to 'classTuple'"""
        dispatcher = self.table.getGeneric(genericName).dispatcher
        return bool(dispatcher.ranked(classTuple))

    def is_a(self, className, ancestor):
        """True if 'className' is 'ancestor' or inherits from it"""
        return ancestor==ANY or self.registry.isAncestor(className, ancestor)


    def reset(self):
        """Forget every class, generic function, and method"""
        self.table.clear()
        self.registry.clear()
        log.debug("Reset %r", self)



_environment = Environment()

def getEnvironment():
    """Return the process-wide default 'Environment'"""
    return _environment

def defineClass(name, parents=(), sealed=False):
    return _environment.defineClass(name, parents, sealed)

def defineGeneric(name, paramNames):
    return _environment.defineGeneric(name, paramNames)

def defineMethod(genericName, classTuple, handler):
    return _environment.defineMethod(genericName, classTuple, handler)

def removeMethod(genericName, classTuple):
    return _environment.removeMethod(genericName, classTuple)

def dispatch(genericName, concreteClassTuple, callArgs=(), callKw=None):
    return _environment.dispatch(
        genericName, concreteClassTuple, callArgs, callKw
    )

def callNext(currentMethod, concreteClassTuple, callArgs=(), callKw=None):
    return _environment.callNext(
        currentMethod, concreteClassTuple, callArgs, callKw
    )

def selectMethod(genericName, classTuple):
    return _environment.selectMethod(genericName, classTuple)

def existsMethod(genericName, classTuple):
    return _environment.existsMethod(genericName, classTuple)

def hasMethod(genericName, classTuple):
    return _environment.hasMethod(genericName, classTuple)

def is_a(className, ancestor):
    return _environment.is_a(className, ancestor)

def reset():
    _environment.reset()
