import unittest

from openriscv.insndb.idents import (
    make_ident_title,
    make_ident_underscores,
)


class TestIdents(unittest.TestCase):
    def test_underscores(self):
        self.assertEqual(make_ident_underscores("fence.i"), "fence_i")
        self.assertEqual(make_ident_underscores("OP-IMM-32"), "op_imm_32")
        self.assertEqual(make_ident_underscores("i·sh5"), "i_sh5")
        self.assertEqual(make_ident_underscores("48b"), "_48b")

    def test_title(self):
        self.assertEqual(make_ident_title("fence.i"), "FenceI")
        self.assertEqual(make_ident_title("OP-IMM-32"), "OpImm32")
        self.assertEqual(make_ident_title("i·sh5"), "ISh5")
        self.assertEqual(make_ident_title("c.addi4spn"), "CAddi4Spn")
        self.assertEqual(make_ident_title("48b"), "_48B")


if __name__ == "__main__":
    unittest.main()
