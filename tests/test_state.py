import unittest

from life_core.codec import decode_text
from life_core.engine import step
from life_core.state import StoredGame, advance, new_game


class TestGameBookkeeping(unittest.TestCase):
    def test_given_fresh_board_when_creating_game_then_generation_zero(self):
        game = new_game(decode_text("#."))
        self.assertEqual(game.generation, 0)

    def test_given_game_when_advancing_then_generation_increments_by_one(self):
        game = new_game(decode_text(".....\n.....\n.###.\n.....\n....."))
        first, d1 = advance(game)
        second, d2 = advance(first)
        self.assertEqual((first.generation, second.generation), (1, 2))
        self.assertEqual((d1, d2), (4, 4))
        self.assertEqual(second.board, game.board)
        self.assertEqual(first.board, step(game.board)[0])
        # the original value is untouched
        self.assertEqual(game.generation, 0)

    def test_given_stored_game_when_compared_then_value_equality(self):
        board = decode_text("##\n##")
        self.assertEqual(StoredGame(board, 3), StoredGame(board=board, generation=3))
        self.assertNotEqual(StoredGame(board, 3), StoredGame(board, 4))


if __name__ == "__main__":
    unittest.main(verbosity=2)
