import unittest
from feature_gate import (
    protocol_version_of, is_older_than, is_at_least, is_exactly,
    is_pre_v594, is_using_experimental_recipe_unlocking,
)
from codec_table import UPSTREAM_V589, UPSTREAM_V594, UPSTREAM_V630


class FakeSession:
    def __init__(self, protocol_version):
        self.protocol_version = protocol_version


class FakeUpstream:
    def __init__(self, protocol_version):
        self.protocol_version = protocol_version


class FakeProxySession:
    def __init__(self, protocol_version):
        self.upstream = FakeUpstream(protocol_version)


class TestFeatureGate(unittest.TestCase):
    def test_is_older_than(self):
        self.assertFalse(is_older_than(UPSTREAM_V594, UPSTREAM_V594))
        self.assertFalse(is_older_than(UPSTREAM_V630, UPSTREAM_V594))
        for version in (-1, 0, 1, UPSTREAM_V589, UPSTREAM_V594 - 1):
            self.assertTrue(is_older_than(version, UPSTREAM_V594))

    def test_is_at_least(self):
        self.assertTrue(is_at_least(UPSTREAM_V594, UPSTREAM_V594))
        self.assertTrue(is_at_least(UPSTREAM_V630, UPSTREAM_V594))
        self.assertFalse(is_at_least(UPSTREAM_V589, UPSTREAM_V594))

    def test_is_exactly(self):
        self.assertTrue(is_exactly(UPSTREAM_V589, UPSTREAM_V589))
        for version in (UPSTREAM_V589 - 1, UPSTREAM_V589 + 1, UPSTREAM_V630, 0):
            self.assertFalse(is_exactly(version, UPSTREAM_V589))

    def test_named_predicates(self):
        self.assertTrue(is_pre_v594(589))
        self.assertFalse(is_pre_v594(594))
        self.assertFalse(is_pre_v594(630))
        self.assertTrue(is_using_experimental_recipe_unlocking(589))
        self.assertFalse(is_using_experimental_recipe_unlocking(594))

    def test_session_objects(self):
        self.assertTrue(is_pre_v594(FakeSession(589)))
        self.assertFalse(is_pre_v594(FakeProxySession(622)))
        self.assertTrue(is_using_experimental_recipe_unlocking(FakeProxySession(589)))
        self.assertEqual(protocol_version_of(FakeProxySession(618)), 618)

    def test_idempotent(self):
        session = FakeSession(618)
        self.assertEqual([is_pre_v594(session) for _ in range(3)], [False] * 3)
        self.assertEqual(session.protocol_version, 618)

    def test_no_version(self):
        with self.assertRaises(TypeError):
            protocol_version_of(object())
        with self.assertRaises(TypeError):
            is_older_than(FakeSession("618"), UPSTREAM_V594)
        with self.assertRaises(TypeError):
            is_exactly(True, UPSTREAM_V589)


if __name__ == '__main__':
    unittest.main()
