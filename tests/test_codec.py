import random
import struct
import unittest

import zstandard

from life_core.board import Board
from life_core.codec import decode_storage, decode_text, encode_storage
from life_core.errors import (
    CorruptBlob,
    DecodeError,
    EmptyBoard,
    InvalidCell,
    InvalidGlyphs,
    InvalidSeparator,
    IrregularShape,
)
from life_core.render import render_text


def _compress(payload):
    return zstandard.ZstdCompressor().compress(payload)


class TestDecodeText(unittest.TestCase):
    def test_given_default_glyphs_when_decoding_then_board_matches(self):
        board = decode_text("#.#\n.#.")
        self.assertEqual((board.width, board.height), (3, 2))
        self.assertEqual(board.cells, (True, False, True, False, True, False))

    def test_given_bytes_with_trailing_newline_when_decoding_then_accepted(self):
        board = decode_text(b"##\n..\n")
        self.assertEqual((board.width, board.height), (2, 2))
        board_crlf = decode_text(b"#.\r\n.#\r\n")
        self.assertEqual(board_crlf.cells, (True, False, False, True))

    def test_given_custom_glyphs_when_decoding_then_board_matches(self):
        board = decode_text("xo|ox|xx", alive="x", dead="o", separator="|")
        self.assertEqual((board.width, board.height), (2, 3))
        self.assertEqual(board.population(), 4)

    def test_given_lines_of_unequal_length_when_decoding_then_irregular_shape(self):
        with self.assertRaises(IrregularShape) as ctx:
            decode_text("###\n...\n####")
        self.assertEqual(ctx.exception.line, 2)
        self.assertEqual(ctx.exception.expected, 3)
        self.assertEqual(ctx.exception.actual, 4)

    def test_given_empty_input_when_decoding_then_empty_board(self):
        for raw, separator in ((b"", "\n"), ("", "\n"), ("\n\n", "\n"), ("||", "|")):
            with self.assertRaises(EmptyBoard):
                decode_text(raw, separator=separator)

    def test_given_foreign_character_when_decoding_then_invalid_cell_with_position(self):
        with self.assertRaises(InvalidCell) as ctx:
            decode_text("#.#\n#x#")
        err = ctx.exception
        self.assertEqual((err.line, err.column, err.char), (1, 1, "x"))
        self.assertIn("'x'", str(err))

    def test_given_invalid_utf8_when_decoding_then_invalid_cell(self):
        with self.assertRaises(InvalidCell) as ctx:
            decode_text(b"#\xff")
        self.assertEqual(ctx.exception.column, 1)

    def test_given_separator_equal_to_glyph_when_decoding_then_invalid_separator(self):
        with self.assertRaises(InvalidSeparator) as ctx:
            decode_text("#.#", separator="#")
        self.assertEqual(ctx.exception.separator, "#")

    def test_given_alive_equal_to_dead_when_decoding_then_invalid_glyphs_not_separator_error(self):
        with self.assertRaises(InvalidGlyphs) as ctx:
            decode_text("##", alive="#", dead="#")
        self.assertNotIsInstance(ctx.exception, InvalidSeparator)
        self.assertEqual((ctx.exception.alive, ctx.exception.dead), ("#", "#"))
        self.assertIn("glyphs", str(ctx.exception))
        self.assertNotIn("separator", str(ctx.exception))

    def test_given_decode_errors_when_caught_then_all_are_decode_errors(self):
        for exc in (EmptyBoard, IrregularShape, InvalidCell, InvalidSeparator, InvalidGlyphs, CorruptBlob):
            self.assertTrue(issubclass(exc, DecodeError))

    def test_given_valid_text_when_decoding_and_rendering_then_text_reproduced(self):
        samples = [
            ("#.#\n.#.", "#", ".", "\n"),
            ("xo|ox|oo", "x", "o", "|"),
            ("@", "@", "_", ","),
            ("1001;0110", "1", "0", ";"),
        ]
        for text, a, d, s in samples:
            self.assertEqual(render_text(decode_text(text, a, d, s), a, d, s), text)


class TestStorageCodec(unittest.TestCase):
    def test_given_boards_when_encoding_then_decoding_returns_equal_board(self):
        rng = random.Random(42)
        boards = [
            Board(width=1, height=1, cells=(True,)),
            Board.empty(8, 1),
            Board(width=9, height=1, cells=(True,) * 9),
            Board(width=13, height=7, cells=tuple(rng.random() < 0.4 for _ in range(91))),
        ]
        for board in boards:
            self.assertEqual(decode_storage(encode_storage(board)), board)

    def test_given_board_when_encoding_then_payload_is_header_plus_packed_bits(self):
        blob = encode_storage(decode_text("#.#"))
        payload = zstandard.ZstdDecompressor().decompress(blob)
        self.assertEqual(payload, struct.pack(">II", 3, 1) + b"\xa0")

    def test_given_same_board_when_encoding_twice_then_decompressed_payload_identical(self):
        board = decode_text(".#.\n..#\n###")
        d = zstandard.ZstdDecompressor()
        self.assertEqual(d.decompress(encode_storage(board)), d.decompress(encode_storage(board)))

    def test_given_garbage_when_decoding_storage_then_corrupt_blob(self):
        with self.assertRaises(CorruptBlob):
            decode_storage(b"definitely not zstd")

    def test_given_size_header_mismatch_when_decoding_storage_then_corrupt_blob(self):
        # 4x4 needs two bytes of cells
        with self.assertRaises(CorruptBlob):
            decode_storage(_compress(struct.pack(">II", 4, 4) + b"\x00"))
        with self.assertRaises(CorruptBlob):
            decode_storage(_compress(struct.pack(">II", 4, 4) + b"\x00\x00\x00"))

    def test_given_bad_header_when_decoding_storage_then_corrupt_blob(self):
        with self.assertRaises(CorruptBlob):
            decode_storage(_compress(b"\x00\x01"))
        with self.assertRaises(CorruptBlob):
            decode_storage(_compress(struct.pack(">II", 0, 3)))

    def test_given_padding_bits_set_when_decoding_storage_then_corrupt_blob(self):
        with self.assertRaises(CorruptBlob):
            decode_storage(_compress(struct.pack(">II", 3, 1) + b"\xff"))


if __name__ == "__main__":
    unittest.main(verbosity=2)
