"""Multiple Dispatch over a Class Hierarchy

 Generic functions whose methods are chosen by the classes of several
 arguments at once.  Classes are plain names registered in a hierarchy with
 multiple inheritance; each method declares a tuple of class names, and a
 call is routed to the method whose classes are nearest (in summed parent
 hops) to the classes of the actual arguments.

 Two class names are reserved: 'ANY' matches every argument, but only
 after every more specific method has been ruled out, and 'MISSING'
 ('"missing"') matches only arguments that weren't supplied.

 When two or more methods are equally near, the method whose signature
 sorts first wins, and an 'AmbiguousDispatchWarning' is issued naming the
 others.  Define a method for a more specific signature to settle it.

 Methods may delegate to the next less-specific method by naming
 'next_method' as their first parameter.
"""

from generics.interfaces import *
from generics.strategy import Signature, single_best_method, strict_best_method
from generics.classes import ClassNode, ClassRegistry
from generics.cache import ResultCache
from generics.functions import Method, GenericFunction, MethodTable
from generics.functions import Dispatcher, Instance, classOf
from generics.api import *
