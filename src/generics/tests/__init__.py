from unittest import TestSuite, defaultTestLoader


def test_suite():

    from generics.tests import test_classes, test_dispatch, test_api, test_cache

    return TestSuite([
        defaultTestLoader.loadTestsFromModule(module)
            for module in (test_classes, test_cache, test_dispatch, test_api)
    ])
