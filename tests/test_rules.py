"""Tests for game rules."""

import pytest
from abalone_engine.core import (
    BLACK,
    EMPTY,
    WHITE,
    GameState,
    InconsistentStateError,
    apply_move,
    create_starting_state,
    expand_selection,
    find_line,
    get_game_result,
    has_winner,
    is_legal_move,
    is_terminal,
    resolve_inline,
)
from abalone_engine.core import rules


def total_pieces(state):
    """Pieces on board plus everything ejected so far."""
    return state.pieces_on_board + state.captured[0] + state.captured[1]


def test_find_line_single():
    """Test a single piece is a line with no direction."""
    info = find_line([(0, 0)])

    assert info.ok is True
    assert info.direction is None
    assert info.ordered == ((0, 0),)


def test_find_line_pair():
    """Test two adjacent pieces are ordered back to front."""
    info = find_line([(1, 0), (0, 0)])

    assert info.ok is True
    assert info.direction == "E"
    assert info.ordered == ((0, 0), (1, 0))


def test_find_line_triple_any_order():
    """Test three pieces in a row are found regardless of input order."""
    info = find_line([(0, 2), (0, 0), (0, 1)])

    assert info.ok is True
    assert info.direction == "NW"
    assert info.ordered == ((0, 2), (0, 1), (0, 0))


def test_find_line_rejects_bad_shapes():
    """Test gaps, bends, duplicates and oversize selections."""
    assert find_line([]).ok is False
    assert find_line([(0, 0), (2, 0)]).ok is False  # Gap
    assert find_line([(0, 0), (1, 0), (1, 1)]).ok is False  # Bent
    assert find_line([(0, 0), (1, 0), (3, 0)]).ok is False  # Gap in three
    assert find_line([(0, 0), (0, 0)]).ok is False  # Duplicate
    assert find_line([(0, 0), (1, 0), (2, 0), (3, 0)]).ok is False  # Too long


def test_expand_single_extends_ahead():
    """Test a single piece grows into the line ahead of it, capped at 3."""
    state = GameState.from_pieces(white=[(0, 0), (1, 0), (2, 0), (3, 0)], black=[])

    line, reason = expand_selection(state, [(0, 0)], "E")
    assert reason is None
    assert line == ((0, 0), (1, 0), (2, 0))

    # Nothing friendly ahead going west
    line, reason = expand_selection(state, [(0, 0)], "W")
    assert line == ((0, 0),)


def test_expand_pair_augments_ahead():
    """Test a pair picks up the own piece right ahead of its front."""
    state = GameState.from_pieces(white=[(0, 0), (1, 0), (2, 0)], black=[])

    line, reason = expand_selection(state, [(0, 0), (1, 0)], "E")
    assert reason is None
    assert line == ((0, 0), (1, 0), (2, 0))


def test_expand_pair_augments_behind():
    """Test a pair picks up the own piece right behind its back."""
    state = GameState.from_pieces(white=[(0, 0), (1, 0), (2, 0)], black=[])

    line, reason = expand_selection(state, [(1, 0), (2, 0)], "E")
    assert reason is None
    assert line == ((0, 0), (1, 0), (2, 0))


def test_expand_pair_moving_backward():
    """Test a pair moved against its line direction is reversed first."""
    state = GameState.from_pieces(white=[(0, 0), (1, 0), (2, 0)], black=[])

    line, reason = expand_selection(state, [(1, 0), (2, 0)], "W")
    assert reason is None
    assert line == ((2, 0), (1, 0), (0, 0))


def test_expand_pair_without_neighbors():
    """Test a lone pair stays a pair."""
    state = GameState.from_pieces(white=[(0, 0), (1, 0)], black=[(2, 0)])

    line, reason = expand_selection(state, [(0, 0), (1, 0)], "E")
    assert line == ((0, 0), (1, 0))


def test_expand_rejections():
    """Test selection-level rejection reasons."""
    state = GameState.from_pieces(white=[(0, 0), (1, 0), (0, 1)], black=[(3, 0)])

    assert expand_selection(state, [], "E") == (None, rules.EMPTY_SELECTION)
    assert expand_selection(state, [(0, 0)], "N") == (None, rules.UNKNOWN_DIRECTION)
    assert expand_selection(state, [(3, 0)], "W") == (None, rules.NOT_YOUR_PIECES)
    assert expand_selection(state, [(2, 0)], "W") == (None, rules.NOT_YOUR_PIECES)
    assert expand_selection(state, [(1, 0), (0, 1), (0, 0)], "E") == (None, rules.NOT_A_LINE)
    assert expand_selection(state, [(0, 0), (1, 0)], "SE") == (None, rules.ONLY_INLINE)


def test_opening_slide():
    """Test White's (0,-4) moving SE slides the column of three."""
    state = create_starting_state(4)

    result = apply_move(state, [(0, -4)], "SE")

    assert result.ok is True
    assert result.pushed_count == 0
    assert result.ejected_count == 0
    assert result.moved == ((0, -4), (0, -3), (0, -2))

    next_state = result.next_state
    assert next_state.player == BLACK
    assert next_state.get((0, -4)) == EMPTY
    assert next_state.get((0, -3)) == WHITE
    assert next_state.get((0, -2)) == WHITE
    assert next_state.get((0, -1)) == WHITE
    assert next_state.count(WHITE) == 14


def test_three_push_one():
    """Test a line of three pushes a single piece into open space."""
    state = GameState.from_pieces(
        white=[(-2, 0), (-1, 0), (0, 0)], black=[(1, 0), (-3, 3)]
    )

    result = apply_move(state, [(-2, 0), (-1, 0), (0, 0)], "E")

    assert result.ok is True
    assert result.pushed_count == 1
    assert result.ejected_count == 0

    next_state = result.next_state
    assert next_state.pieces_of(WHITE) == [(-1, 0), (0, 0), (1, 0)]
    assert next_state.get((2, 0)) == BLACK
    assert next_state.get((-2, 0)) == EMPTY
    assert next_state.captured == (0, 0)


def test_push_off_edge_ejects():
    """Test a piece pushed past the edge is captured."""
    state = GameState.from_pieces(white=[(2, 0), (3, 0)], black=[(4, 0), (-4, 4)])

    result = apply_move(state, [(2, 0), (3, 0)], "E")

    assert result.ok is True
    assert result.pushed_count == 1
    assert result.ejected_count == 1

    next_state = result.next_state
    assert next_state.captured_by(WHITE) == 1
    assert next_state.captured_by(BLACK) == 0
    assert next_state.pieces_of(WHITE) == [(3, 0), (4, 0)]
    assert next_state.pieces_of(BLACK) == [(-4, 4)]


def test_three_push_two_off_edge():
    """Test only the pushed piece nearest the edge is ejected."""
    state = GameState.from_pieces(
        white=[(0, 0), (1, 0), (2, 0)], black=[(3, 0), (4, 0)]
    )

    result = apply_move(state, [(0, 0)], "E")

    assert result.ok is True
    assert result.pushed_count == 2
    assert result.ejected_count == 1
    assert result.next_state.captured_by(WHITE) == 1
    assert result.next_state.pieces_of(BLACK) == [(4, 0)]
    assert result.next_state.pieces_of(WHITE) == [(1, 0), (2, 0), (3, 0)]


def test_push_requires_more_pieces():
    """Test a line can only push a strictly shorter run."""
    # 1 vs 1
    state = GameState.from_pieces(white=[(0, 0)], black=[(1, 0)])
    assert apply_move(state, [(0, 0)], "E").reason == rules.NOT_ENOUGH_PIECES

    # 2 vs 2
    state = GameState.from_pieces(white=[(-1, 0), (0, 0)], black=[(1, 0), (2, 0)])
    assert apply_move(state, [(-1, 0), (0, 0)], "E").reason == rules.NOT_ENOUGH_PIECES

    # 3 vs 3
    state = GameState.from_pieces(
        white=[(-2, 0), (-1, 0), (0, 0)], black=[(1, 0), (2, 0), (3, 0)]
    )
    assert apply_move(state, [(-2, 0)], "E").reason == rules.NOT_ENOUGH_PIECES


def test_push_into_long_opposing_row():
    """Test a run longer than 3 is simply too strong to push."""
    state = GameState.from_pieces(
        white=[(-3, 0), (-2, 0), (-1, 0)], black=[(0, 0), (1, 0), (2, 0), (3, 0), (4, 0)]
    )

    result = apply_move(state, [(-3, 0)], "E")

    assert result.ok is False
    assert result.reason == rules.NOT_ENOUGH_PIECES


def test_pushed_piece_backed_by_own_color():
    """Test a piece with a friend right behind it counts as a longer run."""
    state = GameState.from_pieces(white=[(0, 0), (1, 0)], black=[(2, 0), (3, 0)])

    result = apply_move(state, [(0, 0), (1, 0)], "E")

    assert result.ok is False
    assert result.reason == rules.NOT_ENOUGH_PIECES


def test_opponent_backed():
    """Test a push is blocked when the landing cell is occupied."""
    state = GameState.from_pieces(
        white=[(0, 0), (1, 0), (3, 0)], black=[(2, 0)]
    )

    result = apply_move(state, [(0, 0), (1, 0)], "E")

    assert result.ok is False
    assert result.reason == rules.OPPONENT_BACKED


def test_cannot_push_own_pieces():
    """Test a full line of three stopped by a fourth own piece."""
    state = GameState.from_pieces(white=[(0, 0), (1, 0), (2, 0), (3, 0)], black=[])

    result = apply_move(state, [(0, 0)], "E")

    assert result.ok is False
    assert result.reason == rules.OWN_PIECE_BLOCKS


def test_off_the_board():
    """Test moving over the edge without pushing."""
    state = GameState.from_pieces(white=[(4, 0), (3, 0)], black=[])

    assert apply_move(state, [(4, 0)], "E").reason == rules.OFF_BOARD
    assert apply_move(state, [(3, 0), (4, 0)], "E").reason == rules.OFF_BOARD
    assert apply_move(state, [(4, 0)], "NE").reason == rules.OFF_BOARD


def test_rejection_reasons_on_opening():
    """Test a few illegal opening moves."""
    state = create_starting_state(4)

    assert apply_move(state, [(0, 4)], "NW").reason == rules.NOT_YOUR_PIECES
    assert apply_move(state, [(0, -4), (2, -4)], "SE").reason == rules.NOT_A_LINE
    assert apply_move(state, [(0, -4), (1, -4)], "SE").reason == rules.ONLY_INLINE
    assert apply_move(state, [(0, -4)], "NW").reason == rules.OFF_BOARD


def test_rejected_move_has_no_state():
    """Test rejections leave no next state."""
    state = create_starting_state(4)
    result = apply_move(state, [(0, -4)], "NW")

    assert result.ok is False
    assert result.next_state is None
    assert result.pushed_count == 0
    assert result.ejected_count == 0


def test_is_legal_move():
    """Test legality check matches apply_move without the new state."""
    state = create_starting_state(4)

    legal = is_legal_move(state, [(0, -4)], "SE")
    assert legal.ok is True
    assert legal.next_state is None

    illegal = is_legal_move(state, [(0, -4)], "NW")
    assert illegal.ok is False
    assert illegal.reason == rules.OFF_BOARD


def test_apply_move_does_not_mutate():
    """Test the input state is untouched after a move."""
    state = GameState.from_pieces(white=[(2, 0), (3, 0)], black=[(4, 0), (-4, 4)])
    before = (state.cells, state.player, state.captured)

    result = apply_move(state, [(2, 0)], "E")

    assert result.ok is True
    assert (state.cells, state.player, state.captured) == before
    assert result.next_state is not state


def test_turn_alternates():
    """Test every successful move flips the side to move."""
    state = create_starting_state(4)

    state = apply_move(state, [(0, -4)], "SE").next_state
    assert state.player == BLACK

    state = apply_move(state, [(0, 4)], "NW").next_state
    assert state.player == WHITE


def test_resolve_inline_direct():
    """Test resolving an already-ordered line."""
    state = GameState.from_pieces(white=[(0, 0), (1, 0)], black=[(2, 0)])

    result = resolve_inline(state, ((0, 0), (1, 0)), "E")

    assert result.ok is True
    assert result.next_state.pieces_of(WHITE) == [(1, 0), (2, 0)]
    assert result.next_state.pieces_of(BLACK) == [(3, 0)]


def test_pieces_conserved():
    """Test pieces on board plus captures never change across moves."""
    state = GameState.from_pieces(
        white=[(0, 0), (1, 0), (2, 0)], black=[(3, 0), (4, 0)], captured=(2, 1)
    )
    result = apply_move(state, [(0, 0)], "E")

    assert total_pieces(result.next_state) == total_pieces(state)

    opening = create_starting_state(4)
    for q, r in opening.pieces_of(WHITE):
        for direction in ("E", "NE", "NW", "W", "SW", "SE"):
            result = apply_move(opening, [(q, r)], direction)
            if result.ok:
                assert total_pieces(result.next_state) == 28


def test_black_captures_count_for_black():
    """Test ejections credit the side that pushed."""
    state = GameState.from_pieces(
        white=[(-4, 0)], black=[(-2, 0), (-3, 0)], player=BLACK
    )
    result = apply_move(state, [(-2, 0)], "W")

    assert result.ok is True
    assert result.ejected_count == 1
    assert result.next_state.captured == (0, 1)
    assert result.next_state.player == WHITE


def test_has_winner():
    """Test win threshold of 6 captures."""
    assert has_winner(create_starting_state(4)) is None

    state = GameState.from_pieces(white=[(0, 0)], black=[(1, 1)], captured=(5, 5))
    assert has_winner(state) is None
    assert is_terminal(state) is False
    assert get_game_result(state) is None

    state = GameState.from_pieces(white=[(0, 0)], black=[(1, 1)], captured=(6, 2))
    assert has_winner(state) == WHITE
    assert is_terminal(state) is True
    assert get_game_result(state) == "White wins 6-2"

    state = GameState.from_pieces(white=[(0, 0)], black=[(1, 1)], captured=(0, 7))
    assert has_winner(state) == BLACK


def test_has_winner_inconsistent():
    """Test both players over the threshold is reported, not resolved."""
    state = GameState.from_pieces(white=[(0, 0)], black=[(1, 1)], captured=(6, 6))

    with pytest.raises(InconsistentStateError):
        has_winner(state)
