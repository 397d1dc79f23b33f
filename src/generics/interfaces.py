from zope.interface import Interface, Attribute

__all__ = [
    'IClassNode', 'IClassRegistry', 'IMethod', 'IMethodTable',
    'IGenericFunction', 'IDispatcher', 'IResultCache', 'IInstance',
    'IClassListener', 'IMethodListener',
    'DispatchError', 'RegistrationError', 'CycleError', 'SealedClassError',
    'UnknownClassError', 'DuplicateGenericError', 'UnknownGenericError',
    'ArityMismatchError', 'NoApplicableMethodError', 'NoNextMethodError',
    'AmbiguousDispatchError', 'AmbiguousDispatchWarning',
    'ANY', 'MISSING', 'ANY_DISTANCE', 'INFINITY',
]


ANY = "ANY"
MISSING = "missing"

ANY_DISTANCE = 1000000
INFINITY = float('inf')


class DispatchError(Exception):
    """Base class for errors raised by the dispatch framework"""


class RegistrationError(DispatchError):
    """A class, generic, or method definition was refused"""


class CycleError(RegistrationError):
    """Registration would make a class its own ancestor"""


class SealedClassError(RegistrationError):
    """Attempt to redefine or remove a sealed class"""


class UnknownClassError(RegistrationError):
    """A parent class was not registered, or a reserved name was used"""


class DuplicateGenericError(RegistrationError):
    """Generic already exists with a different number of dispatch arguments"""


class UnknownGenericError(RegistrationError, LookupError):
    """No generic function has been defined under the given name"""


class ArityMismatchError(RegistrationError):
    """Signature length doesn't match the generic's dispatch arguments"""


class NoApplicableMethodError(DispatchError, LookupError):
    """No applicable method has been defined for the given arguments"""


class NoNextMethodError(NoApplicableMethodError):
    """The executing method has no less-specific method to chain to"""


class AmbiguousDispatchError(DispatchError):
    """More than one choice of method is possible"""

    def __init__(self, winner, competitors):
        DispatchError.__init__(self, winner, competitors)
        self.winner = winner
        self.competitors = tuple(competitors)


class AmbiguousDispatchWarning(UserWarning):

    """More than one choice of method was possible

    Dispatch proceeded with 'winner', the method whose signature renders
    first in lexicographic order; 'competitors' are the methods that tied
    with it.  Define a method for a more specific signature to resolve it.
    """

    def __init__(self, winner, competitors):
        self.winner = winner
        self.competitors = tuple(competitors)
        UserWarning.__init__(self,
            "ambiguous dispatch: selected %r over %s" % (
                winner, ', '.join([repr(c) for c in self.competitors])
            )
        )








class IClassNode(Interface):

    """A registered class: a name and its ordered parent class names"""

    name = Attribute("""Unique class name""")

    parents = Attribute("""Tuple of parent class names, in declared order""")

    sealed = Attribute("""True if the class may not be redefined""")


class IClassListener(Interface):

    def classChanged(name):
        """Called after the class 'name' is added, replaced, or removed"""


class IClassRegistry(Interface):

    """Class hierarchy with (multiple) inheritance and distance queries"""

    def register(name, parents=(), sealed=False):
        """Add or replace class 'name', returning the replaced node or 'None'

        Raises 'CycleError' if the new parents would make 'name' its own
        ancestor, 'SealedClassError' if the existing definition is sealed,
        and 'UnknownClassError' if a parent isn't registered.  On error the
        registry is left unchanged."""

    def unregister(name):
        """Remove class 'name' (which must have no registered subclasses)"""

    def distance(fromClass, toClass):
        """Minimum number of parent hops from 'fromClass' to 'toClass'

        Returns 'INFINITY' if 'toClass' is not an ancestor of 'fromClass'."""

    def isAncestor(fromClass, toClass):
        """True if 'toClass' is 'fromClass' or one of its ancestors"""

    def ancestors(name):
        """Return a dictionary mapping every ancestor of 'name' to its distance"""

    def subscribe(listener):
        """Call 'listener.classChanged(name)' when the hierarchy changes

        Multiple calls with the same listener should be treated as a no-op."""

    def unsubscribe(listener):
        """Stop calling 'listener.classChanged()'"""


class IMethod(Interface):

    """A handler registered for one signature of a generic function"""

    generic = Attribute("""Name of the owning generic function""")

    signature = Attribute("""Tuple of class names, one per dispatch argument""")

    function = Attribute("""The handler callable""")


class IMethodListener(Interface):

    def methodsChanged(generic):
        """Called after the methods of 'generic' are added or removed"""


class IGenericFunction(Interface):

    """Named operation whose implementation is chosen per call"""

    name = Attribute("""The generic's name""")

    params = Attribute("""Tuple of dispatch argument names""")

    def __call__(*args, **kw):
        """Dispatch on the classes of the arguments and invoke the method"""

    def when(*classes):
        """Decorator: register the following function for 'classes'"""

    def subscribe(listener):
        """Call 'listener.methodsChanged(generic)' when methods change"""

    def unsubscribe(listener):
        """Stop calling 'listener.methodsChanged()'"""


class IMethodTable(Interface):

    """Generic functions and the method signatures registered for them"""

    def registerGeneric(name, paramNames):
        """Create (or redefine with the same arity) generic 'name'"""

    def registerMethod(genericName, classTuple, handler):
        """Register 'handler' for 'classTuple', returning an 'IMethod'"""

    def removeMethod(genericName, classTuple):
        """Remove and return the method for exactly 'classTuple' (or 'None')"""

    def signaturesFor(genericName):
        """Return a list of every signature registered for 'genericName'"""

    def methodsFor(genericName):
        """Return a list of every 'IMethod' registered for 'genericName'"""


class IResultCache(Interface):

    """Memo of dispatch outcomes, keyed by concrete class tuple"""

    def get(key, default=None):
        """Return the entry stored for 'key', or 'default'"""

    def set(key, entry):
        """Store 'entry' for 'key'"""

    def clear():
        """Forget all entries"""


class IDispatcher(Interface):

    """Resolves calls on one generic function to its best method"""

    def resolve(classes):
        """Return '(method, competitors)' for the concrete 'classes' tuple"""

    def ranked(classes, exclude=()):
        """Return lists of applicable methods, grouped by total distance"""

    def nextMethod(current, classes):
        """Return the method that follows 'current' for 'classes'"""

    def dispatch(classes, args, kw=None):
        """Invoke the best method for 'classes' with 'args' and 'kw'"""

    def callNext(current, classes, args, kw=None):
        """Invoke the method following 'current' with 'args' and 'kw'"""

    def clear():
        """Discard all cached outcomes"""


class IInstance(Interface):

    """A value tagged with the name of its class"""

    className = Attribute("""The class name used for dispatching""")

    value = Attribute("""The wrapped value""")
