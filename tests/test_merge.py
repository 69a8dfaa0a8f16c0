import unittest

from layered_config.merge import apply_defaults, merge_into

from schemas import AppConfig, Base, EndToEndConfig, Foo, Roster


def _partial(**values) -> EndToEndConfig:
    config = EndToEndConfig.zero()
    for dotted, value in values.items():
        section, field = dotted.split("__")
        setattr(getattr(config, section), field, value)
    return config


class MergeTests(unittest.TestCase):
    def test_first_source_wins(self) -> None:
        dst = _partial(base__a=1)
        merge_into(dst, _partial(base__a=2))
        self.assertEqual(dst.base.a, 1)

    def test_nested_structures_merge_leaf_by_leaf(self) -> None:
        dst = _partial(base__a=1)
        merge_into(dst, _partial(base__b="2", foo__bar="4"))
        self.assertEqual(dst.base.a, 1)
        self.assertEqual(dst.base.b, "2")
        self.assertEqual(dst.foo.bar, "4")

    def test_explicit_zero_stays_overwritable(self) -> None:
        dst = EndToEndConfig.zero()
        merge_into(dst, _partial(base__a=0, base__b=""))
        self.assertEqual(dst.base.a, 0)
        self.assertEqual(dst.base.b, "")

        merge_into(dst, _partial(base__a=7, base__b="later"))
        self.assertEqual(dst.base.a, 7)
        self.assertEqual(dst.base.b, "later")

    def test_false_is_treated_as_unset(self) -> None:
        dst = AppConfig.zero()
        dst.debug = False
        src = AppConfig.zero()
        src.debug = True
        merge_into(dst, src)
        self.assertTrue(dst.debug)

    def test_optional_leaf_keeps_explicit_zero(self) -> None:
        dst = AppConfig.zero()
        dst.retries = 0
        src = AppConfig.zero()
        src.retries = 3
        merge_into(dst, src)
        self.assertEqual(dst.retries, 0)

    def test_merge_into_full_config_is_a_no_op(self) -> None:
        full = EndToEndConfig(base=Base(a=1, b="2"), foo=Foo(bar="4"))
        before = full.model_dump()
        merge_into(full, EndToEndConfig(base=Base(a=9, b="9"), foo=Foo(bar="9")))
        merge_into(full, full.model_copy(deep=True))
        self.assertEqual(full.model_dump(), before)

    def test_source_is_not_mutated(self) -> None:
        src = _partial(base__b="2")
        before = src.model_dump()
        merge_into(_partial(base__a=1), src)
        self.assertEqual(src.model_dump(), before)

    def test_container_values_are_copied(self) -> None:
        dst = AppConfig.zero()
        src = AppConfig.zero()
        src.tags = ["a"]
        merge_into(dst, src)
        dst.tags.append("b")
        self.assertEqual(src.tags, ["a"])

    def test_empty_sequence_stays_overwritable(self) -> None:
        dst = Roster.zero()
        merge_into(dst, Roster.model_construct(names=[]))
        merge_into(dst, Roster.model_construct(names=()))
        merge_into(dst, Roster.model_construct(names=["later"]))
        self.assertEqual(list(dst.names), ["later"])

        merge_into(dst, Roster.model_construct(names=["ignored"]))
        self.assertEqual(list(dst.names), ["later"])

    def test_mismatched_types_are_rejected(self) -> None:
        with self.assertRaises(TypeError):
            merge_into(EndToEndConfig.zero(), AppConfig.zero())

    def test_merge_from_method(self) -> None:
        dst = _partial(foo__bar="x")
        dst.merge_from(_partial(foo__bar="y", base__a=3))
        self.assertEqual(dst.foo.bar, "x")
        self.assertEqual(dst.base.a, 3)


class ApplyDefaultsTests(unittest.TestCase):
    def test_defaults_fill_only_unset_optional_leaves(self) -> None:
        config = AppConfig.zero()
        config.database.port = 6543
        apply_defaults(config)

        self.assertEqual(config.database.port, 6543)
        self.assertEqual(config.logging.level, "INFO")
        self.assertEqual(config.logging.file.rotation.backup_count, 5)
        self.assertEqual(config.tags, [])
        self.assertIsNone(config.retries)
        # Required leaves have no default to apply.
        self.assertEqual(config.name, "")
        self.assertEqual(config.database.host, "")


if __name__ == "__main__":
    unittest.main()
