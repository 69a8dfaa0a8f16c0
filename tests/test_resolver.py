import tempfile
import unittest
from pathlib import Path

from layered_config.resolver import WalkingResolver


class WalkingResolverTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name).resolve()
        self.deep = self.root / "a" / "b"
        self.deep.mkdir(parents=True)
        (self.root / "config.yaml").write_text("name: root\n", encoding="utf-8")

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_finds_file_in_base_dir(self) -> None:
        resolver = WalkingResolver(base_dir=self.root)
        self.assertEqual(resolver.resolve("config.yaml", 0), self.root / "config.yaml")

    def test_walks_up_to_max_depth(self) -> None:
        resolver = WalkingResolver(base_dir=self.deep)
        self.assertIsNone(resolver.resolve("config.yaml", 1))
        self.assertEqual(resolver.resolve("config.yaml", 2), self.root / "config.yaml")

    def test_nearest_file_wins(self) -> None:
        (self.deep.parent / "config.yaml").write_text("name: a\n", encoding="utf-8")
        resolver = WalkingResolver(base_dir=self.deep)
        self.assertEqual(resolver.resolve("config.yaml", 5), self.deep.parent / "config.yaml")

    def test_directories_do_not_match(self) -> None:
        (self.root / "conf.d").mkdir()
        resolver = WalkingResolver(base_dir=self.root)
        self.assertIsNone(resolver.resolve("conf.d", 0))

    def test_absolute_hint(self) -> None:
        resolver = WalkingResolver(base_dir=self.deep)
        target = self.root / "config.yaml"
        self.assertEqual(resolver.resolve(str(target), 0), target)
        self.assertIsNone(resolver.resolve(str(self.root / "missing.yaml"), 3))

    def test_negative_depth_checks_base_dir_only(self) -> None:
        resolver = WalkingResolver(base_dir=self.root)
        self.assertEqual(resolver.resolve("config.yaml", -1), self.root / "config.yaml")


if __name__ == "__main__":
    unittest.main()
