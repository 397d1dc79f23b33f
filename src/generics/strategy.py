"""Distance Scoring and Method Selection Strategies

    Signature -- immutable tuple of class names, with a canonical rendering
        used to break ties

    signature_distance -- total inheritance distance from a tuple of
        concrete classes to a signature (or 'INFINITY' if inapplicable)

    ordered_methods -- applicable methods grouped into levels of equal
        distance, most specific level first

    single_best_method, strict_best_method -- method combiners that pick a
        winner from 'ordered_methods()' output

    takes_next_method -- does a handler expect a 'next_method' argument?
"""

import inspect

from generics.interfaces import *

__all__ = [
    'Signature', 'signature_distance', 'ordered_methods', 'flatten',
    'single_best_method', 'strict_best_method', 'takes_next_method',
    'position_distance',
]


class Signature(tuple):

    """Tuple of class names, one per dispatched argument"""

    __slots__ = ()

    def __new__(cls, classes):
        classes = tuple(classes)
        for name in classes:
            if not isinstance(name,str) or not name:
                raise TypeError("Class names must be non-empty strings", name)
        return tuple.__new__(cls, classes)

    def render(self):
        """Canonical string form, used to order tied signatures"""
        return ','.join(self)

    def __repr__(self):
        return 'Signature(%s)' % self.render()









def position_distance(registry, concrete, declared):
    """Distance from one 'concrete' argument class to a 'declared' class"""

    if declared==ANY:
        return ANY_DISTANCE

    if declared==MISSING or concrete==MISSING:
        if declared==concrete:
            return 0
        return INFINITY

    return registry.distance(concrete, declared)


def signature_distance(registry, signature, classes):
    """Sum of per-argument distances; 'INFINITY' if any argument can't match"""

    total = 0
    for concrete, declared in zip(classes, signature):
        d = position_distance(registry, concrete, declared)
        if d==INFINITY:
            return INFINITY
        total += d
    return total


def ordered_methods(registry, methods, classes, exclude=()):
    """Return list of '(distance,[method,...])' levels, most specific first

    Methods whose signature can't accept 'classes' are dropped, as are any
    methods in 'exclude'.  Within a level, methods are sorted by the
    canonical rendering of their signatures, then by the class names
    themselves (names may contain the rendering's separator)."""

    levels = {}
    for method in methods:
        if method in exclude:
            continue
        d = signature_distance(registry, method.signature, classes)
        if d!=INFINITY:
            levels.setdefault(d,[]).append(method)

    ordered = []
    for d in sorted(levels):
        level = levels[d]
        level.sort(key=lambda m: (m.signature.render(), tuple(m.signature)))
        ordered.append((d,level))
    return ordered


def flatten(levels):
    """Yield the methods of 'ordered_methods()' output in precedence order"""
    for d, level in levels:
        for method in level:
            yield method













def single_best_method(levels):
    """Return '(winner,competitors)' from the most specific level

    Ties go to the first signature in lexicographic order; the others are
    returned as 'competitors' so that callers can report the ambiguity."""

    if not levels:
        raise NoApplicableMethodError
    d, level = levels[0]
    return level[0], tuple(level[1:])


def strict_best_method(levels):
    """Like 'single_best_method()', but raise 'AmbiguousDispatchError' on ties"""

    winner, competitors = single_best_method(levels)
    if competitors:
        raise AmbiguousDispatchError(winner, competitors)
    return winner, competitors


def takes_next_method(function):
    """True if 'function' names 'next_method' as its first parameter"""

    try:
        params = list(inspect.signature(function).parameters.values())
    except (TypeError, ValueError):
        return False    # not introspectable, therefore not chainable

    return bool(params) and params[0].name=='next_method' and \
        params[0].kind in (params[0].POSITIONAL_ONLY,
                           params[0].POSITIONAL_OR_KEYWORD)
