import unittest
import threading

from contractsum import PathOptions, get_options, set_options
from contractsum.options import _opts

class TestOptions(unittest.TestCase):

    def tearDown(self):
        _opts.pop(threading.get_ident(), None)

    def test_defaults(self) -> None:
        opts = get_options()
        self.assertEqual(opts.optimizer, "auto")
        self.assertEqual(opts.exhaustive_limit, 5)
        self.assertEqual(opts.opt_einsum_kind, "auto-hq")

    def test_options(self) -> None:

        opts = [lambda: PathOptions(optimizer="greedy"),
                lambda: PathOptions(exhaustive_limit=8),
                lambda: PathOptions(optimizer="opt_einsum", opt_einsum_kind="dp")]

        for ofunc in opts:
            with ofunc() as opts1:
                with ofunc() as opts2:
                    self.assertIs(opts2, get_options())
                self.assertIs(opts1, get_options())
            self.assertNotIn(threading.get_ident(), _opts)

        opt = opts[0]()
        set_options(opt)
        self.assertIs(opt, get_options())
        with opts[1]() as opts1:
            self.assertIs(opts1, get_options())
        self.assertIs(opt, get_options())

    def test_other_thread(self) -> None:
        seen = []
        with PathOptions(optimizer="reverse"):
            thread = threading.Thread(target=lambda: seen.append(get_options().optimizer))
            thread.start()
            thread.join()
        self.assertEqual(seen, ["auto"])

    def test_invalid(self) -> None:
        with self.assertRaises(ValueError):
            PathOptions(optimizer="fastest") # type: ignore
        with self.assertRaises(ValueError):
            PathOptions(exhaustive_limit=1)
        with self.assertRaises(ValueError):
            PathOptions(opt_einsum_kind="slowest") # type: ignore

if __name__ == "__main__":
    unittest.main()
