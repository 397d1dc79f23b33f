"""Generic function implementations"""

import logging, warnings
from sys import _getframe
from _thread import allocate_lock
from weakref import WeakKeyDictionary

from zope.interface import implementer

from generics.interfaces import *
from generics.strategy import Signature, ordered_methods, single_best_method
from generics.strategy import takes_next_method
from generics.cache import ResultCache, CacheEntry

__all__ = [
    'Method', 'GenericFunction', 'MethodTable', 'Dispatcher', 'Instance',
    'classOf',
]

log = logging.getLogger(__name__)


@implementer(IInstance)
class Instance(object):

    """A value carrying an explicit class name for dispatching"""

    __slots__ = 'className', 'value'

    def __init__(self, className, value=None):
        self.className = className
        self.value = value

    def __eq__(self,other):
        return isinstance(other,Instance) and \
            self.className==other.className and self.value==other.value

    def __ne__(self,other):
        return not self.__eq__(other)

    __hash__ = None

    def __repr__(self):
        return "Instance(%r, %r)" % (self.className, self.value)


def classOf(ob):
    """Return the class name used to dispatch on 'ob'

    Values providing 'IInstance' carry their own class name; anything else
    is classified by the name of its Python type (e.g. '"int"')."""

    if IInstance.providedBy(ob):
        return ob.className
    return type(ob).__name__


@implementer(IMethod)
class Method(object):

    """Handler registered for one signature of a generic function"""

    __slots__ = 'generic', 'signature', 'function', 'chained'

    def __init__(self, generic, signature, function):
        self.generic = generic
        self.signature = Signature(signature)
        self.function = function
        self.chained = takes_next_method(function)

    def __repr__(self):
        return "<Method %s(%s)>" % (self.generic, self.signature.render())









def _toSignature(classes):
    if isinstance(classes,str):
        classes = (classes,)
    return Signature(classes)


@implementer(IGenericFunction)
class GenericFunction(object):

    """Extensible multi-dispatch generic function

    Calling the generic function classifies each dispatch argument with
    'classOf()' (arguments that weren't supplied are classified as
    'MISSING'), then invokes the best method for the resulting classes."""

    def __init__(self, name, params, registry, method_combiner=None):
        self.name = name
        self.params = self._checkParams(params)
        self.registry = registry
        self.__lock = allocate_lock()
        self.__methods = {}
        self.__subscribers = WeakKeyDictionary()
        self.dispatcher = Dispatcher(self, registry, method_combiner)

    def _checkParams(self, params):
        if isinstance(params,str):
            params = (params,)
        params = tuple(params)
        if not params:
            raise ArityMismatchError(
                "Generic %r needs at least one dispatch argument" % (self.name,)
            )
        if len(set(params))!=len(params):
            raise TypeError("Duplicate argument name in %r" % (params,))
        return params

    def __call__(self, *args, **kw):
        return self.dispatcher.dispatch(self.classesOf(args,kw), args, kw)

    def classesOf(self, args, kw):
        """Return the concrete class tuple for a call with 'args' and 'kw'"""
        classes = []
        for pos, name in enumerate(self.params):
            if pos<len(args):
                classes.append(classOf(args[pos]))
            elif name in kw:
                classes.append(classOf(kw[name]))
            else:
                classes.append(MISSING)
        return tuple(classes)

    def __repr__(self):
        return "<GenericFunction %s(%s)>" % (self.name, ', '.join(self.params))




    def addMethod(self, classes, function):
        """Use 'function' when the dispatch arguments match 'classes'

        Returns the new 'Method'.  An existing method for the same signature
        is replaced."""

        signature = _toSignature(classes)
        if len(signature)!=len(self.params):
            raise ArityMismatchError(
                "%r dispatches on %d argument(s), not %d"
                % (self.name, len(self.params), len(signature))
            )
        if not callable(function):
            raise TypeError("Method for %r must be callable" % (self.name,),
                function)

        for klass in signature:
            if klass not in (ANY,MISSING) and klass not in self.registry:
                log.warning(
                    "No definition for class %r in signature %s of %r",
                    klass, signature.render(), self.name
                )

        method = Method(self.name, signature, function)

        self.__lock.acquire()
        try:
            old = self.__methods.get(signature)
            self.__methods[signature] = method
        finally:
            self.__lock.release()

        if old is None:
            log.debug("Added %r", method)
        else:
            log.debug("Replaced %r", method)
        self._notify()
        return method


    def removeMethod(self, classes):
        """Remove and return the method for exactly 'classes' ('None' if none)"""

        signature = _toSignature(classes)
        self.__lock.acquire()
        try:
            method = self.__methods.pop(signature, None)
        finally:
            self.__lock.release()

        if method is not None:
            log.debug("Removed %r", method)
            self._notify()
        return method


    def when(self, *classes):
        """Add following function to this GF, w/'classes' as its signature

        E.g.::

            @area.when("Circle")
            def area(shape):
                ...
        """

        def decorate(function):
            self.addMethod(classes, function)
            return function

        return decorate




    def getMethod(self, classes):
        return self.__methods.get(_toSignature(classes))

    def methods(self):
        self.__lock.acquire()
        try:
            return list(self.__methods.values())
        finally:
            self.__lock.release()

    def signatures(self):
        return [m.signature for m in self.methods()]

    def clear(self):
        self.__lock.acquire()
        try:
            self.__methods.clear()
        finally:
            self.__lock.release()
        self._notify()


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

    def _notify(self):
        self.__lock.acquire()
        try:
            listeners = list(self.__subscribers.keys())
        finally:
            self.__lock.release()
        for listener in listeners:
            listener.methodsChanged(self)











@implementer(IMethodTable)
class MethodTable(object):

    """Registry of generic functions by name"""

    def __init__(self, registry, method_combiner=None):
        self.registry = registry
        self.method_combiner = method_combiner
        self.__lock = allocate_lock()
        self.__generics = {}

    def registerGeneric(self, name, paramNames):
        """Create generic 'name', or redefine its argument names

        Redefinition must keep the same number of dispatch arguments, and
        keeps any methods already registered."""

        self.__lock.acquire()
        try:
            generic = self.__generics.get(name)
            if generic is None:
                generic = GenericFunction(
                    name, paramNames, self.registry, self.method_combiner
                )
                self.__generics[name] = generic
                log.debug("Defined %r", generic)
                return generic

            params = generic._checkParams(paramNames)
            if len(params)!=len(generic.params):
                raise DuplicateGenericError(
                    "%r is already defined with %d dispatch argument(s)"
                    % (name, len(generic.params))
                )
            generic.params = params
            log.debug("Redefined %r", generic)
            return generic
        finally:
            self.__lock.release()

    def getGeneric(self, name):
        try:
            return self.__generics[name]
        except KeyError:
            raise UnknownGenericError("No generic function named %r" % (name,))

    def registerMethod(self, genericName, classTuple, handler):
        return self.getGeneric(genericName).addMethod(classTuple, handler)

    def removeMethod(self, genericName, classTuple):
        return self.getGeneric(genericName).removeMethod(classTuple)

    def getMethod(self, genericName, classTuple):
        return self.getGeneric(genericName).getMethod(classTuple)

    def signaturesFor(self, genericName):
        return self.getGeneric(genericName).signatures()

    def methodsFor(self, genericName):
        return self.getGeneric(genericName).methods()

    def __contains__(self, name):
        return name in self.__generics

    def __iter__(self):
        return iter(sorted(self.__generics))

    def __len__(self):
        return len(self.__generics)

    def clear(self):
        self.__lock.acquire()
        try:
            generics = list(self.__generics.values())
            self.__generics.clear()
        finally:
            self.__lock.release()
        for generic in generics:
            self.registry.unsubscribe(generic.dispatcher)


def _warnAmbiguous(winner, competitors):
    """Issue 'AmbiguousDispatchWarning' against the first caller outside us"""

    frame = _getframe(1)
    level = 2
    while frame is not None and _isInternal(frame):
        frame = frame.f_back
        level += 1

    warnings.warn(
        AmbiguousDispatchWarning(winner, competitors), stacklevel=level
    )


def _isInternal(frame):
    name = frame.f_globals.get('__name__', '')
    return name.startswith('generics.') and \
        not name.startswith('generics.tests')















@implementer(IDispatcher)
class Dispatcher(object):

    """Select and invoke the methods of one generic function

    Outcomes are memoized per concrete class tuple, and forgotten whenever
    the generic's methods or the class hierarchy change."""

    def __init__(self, generic, registry, method_combiner=None, cache=None):
        if method_combiner is None:
            method_combiner = single_best_method
        if cache is None:
            cache = ResultCache()
        self.generic = generic
        self.registry = registry
        self.method_combiner = method_combiner
        self.cache = cache
        self.__lock = allocate_lock()
        self.__generation = 0
        generic.subscribe(self)
        registry.subscribe(self)

    def methodsChanged(self, generic):
        self.clear()

    def classChanged(self, name):
        self.clear()

    def clear(self):
        self.__lock.acquire()
        try:
            self.__generation += 1
            self.cache.clear()
        finally:
            self.__lock.release()
        log.debug("Cleared dispatch cache of %r", self.generic.name)


    def _checkClasses(self, classes):
        if isinstance(classes,str):
            classes = (classes,)
        classes = tuple(classes)
        if len(classes)!=len(self.generic.params):
            raise TypeError(
                "%r dispatches on %d argument(s); got %d classes"
                % (self.generic.name, len(self.generic.params), len(classes))
            )
        return classes

    def ranked(self, classes, exclude=()):
        return ordered_methods(
            self.registry, self.generic.methods(),
            self._checkClasses(classes), exclude
        )


    def resolve(self, classes):
        """Return the 'CacheEntry' for 'classes', computing it if needed"""

        classes = self._checkClasses(classes)
        entry = self.cache.get(classes)

        if entry is None:
            generation = self.__generation
            levels = self.ranked(classes)
            if not levels:
                raise NoApplicableMethodError(self.generic.name, classes)

            entry = CacheEntry(*self.method_combiner(levels))

            self.__lock.acquire()
            try:
                # Don't store an outcome computed from out-of-date methods
                if generation==self.__generation:
                    self.cache.set(classes, entry)
            finally:
                self.__lock.release()

        if entry.competitors:
            _warnAmbiguous(entry.method, entry.competitors)
        return entry




    def nextMethod(self, current, classes):
        """Return the method that would run for 'classes' if not for 'current'

        Applicable methods are ranked by total distance, then by canonical
        signature; the next method is the one ranked right after 'current'.
        """

        classes = self._checkClasses(classes)
        levels = self.ranked(classes)

        exclude = set()
        for d, level in levels:
            if current in level:
                exclude.update(level[:level.index(current)+1])
                break
            exclude.update(level)
        else:
            exclude = set([current])    # 'current' wasn't applicable

        levels = [
            (d,[m for m in level if m not in exclude]) for d,level in levels
        ]
        levels = [(d,level) for d,level in levels if level]

        if not levels:
            raise NoNextMethodError(current, classes)

        method, competitors = self.method_combiner(levels)
        if competitors:
            _warnAmbiguous(method, competitors)
        return method


    def dispatch(self, classes, args, kw=None):
        method = self.resolve(classes).method
        return self._invoke(method, classes, args, kw)

    def callNext(self, current, classes, args, kw=None):
        method = self.nextMethod(current, classes)
        return self._invoke(method, classes, args, kw)

    def _invoke(self, method, classes, args, kw):
        if kw is None:
            kw = {}
        if method.chained:
            def next_method(*args, **kw):
                return self.callNext(method, classes, args, kw)
            return method.function(next_method, *args, **kw)
        return method.function(*args, **kw)
