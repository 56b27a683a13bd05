from klondike_gym.board import board_from_columns
from klondike_gym.cards import Card, Rank, Suit
from klondike_gym.moves import Move


def up(rank, suit):
    return Card(Rank(rank), Suit(suit), face_up=True)


def down(rank, suit):
    return Card(Rank(rank), Suit(suit), face_up=False)


def foundation_to(top: int):
    """Every suit built A..top."""
    return {suit: [up(r, suit) for r in range(1, top + 1)] for suit in Suit}


def make_endgame(draw_mode=1):
    """Ten-through-A on every foundation, J/Q/K left to play.

    ♠ ♥ ♦ sit in columns 0-2 as K(down) Q(down) J(up); ♣ has K(down) Q(up)
    in column 3 with J♣ alone in the stock.
    """
    tableau = [
        [down(13, Suit.SPADES), down(12, Suit.SPADES), up(11, Suit.SPADES)],
        [down(13, Suit.HEARTS), down(12, Suit.HEARTS), up(11, Suit.HEARTS)],
        [down(13, Suit.DIAMONDS), down(12, Suit.DIAMONDS), up(11, Suit.DIAMONDS)],
        [down(13, Suit.CLUBS), up(12, Suit.CLUBS)],
    ]
    return board_from_columns(
        tableau,
        stock=[down(11, Suit.CLUBS)],
        found=foundation_to(10),
        draw_mode=draw_mode,
    )


def make_won(draw_mode=1):
    return board_from_columns([], found=foundation_to(13), draw_mode=draw_mode)


def card_multiset(board):
    return sorted(c.identity for c in board.all_cards())


def foundations_ordered(board):
    for suit, pile in board.found.items():
        if [c.suit for c in pile] != [suit] * len(pile):
            return False
        if [int(c.rank) for c in pile] != list(range(1, len(pile) + 1)):
            return False
    return True


def make_stacked_deal(draw_mode=1, swaps=()):
    """Deal-shaped board (columns 1..7, stock 24) the greedy solver wins.

    Sevens through Kings sit in the tableau, each suit in one column or
    a column pair, and no two column tops are a rank apart.  The stock
    draws A..6 rank by rank, so every drawn card goes straight to its
    foundation; hearts finish before any column empties.  Each pair in *swaps*
    exchanges two positions of the draw order.
    """
    S, H, D, C = Suit.SPADES, Suit.HEARTS, Suit.DIAMONDS, Suit.CLUBS

    def column(suit, ranks):
        cards = [down(r, suit) for r in ranks]
        cards[-1].face_up = True
        return cards

    tableau = [
        column(H, [13]),
        column(D, [8, 7]),
        column(C, [13, 12, 11]),
        column(C, [10, 9, 8, 7]),
        column(D, [13, 12, 11, 10, 9]),
        column(H, [12, 11, 10, 9, 8, 7]),
        column(S, [13, 12, 11, 10, 9, 8, 7]),
    ]
    order = [(r, s) for r in range(1, 6) for s in (S, H, D, C)]
    order += [(6, H), (6, S), (6, D), (6, C)]
    for i, j in swaps:
        order[i], order[j] = order[j], order[i]
    stock = [down(r, s) for r, s in reversed(order)]
    return board_from_columns(tableau, stock=stock, draw_mode=draw_mode)


# Opening the greedy solver plays on make_midgame() in either draw mode.
MIDGAME_OPENING = [
    Move.tab_to_tab(1, 1, 0), Move.flip(1),   # Q♥ J♠ onto K♠
    Move.tab_to_tab(1, 0, 0),                 # 10♥ onto J♠, column 1 empties
    Move.tab_to_tab(0, 5, 1), Move.flip(0),   # K♠ run into the empty column
    Move.tab_to_found(0, Suit.HEARTS), Move.flip(0),
    Move.tab_to_found(1, Suit.HEARTS),
]


def make_midgame(draw_mode=1):
    """Spades and hearts from 9 up in play, diamonds and clubs still to go.

    Column 1's run has to be moved onto K♠, the K♠ run has to move into
    the emptied column, and 10♠ is buried in the waste under K♥ so the
    stock must be recycled.  The Aces of ♦ and ♣ sit at the bottom of
    column 0; the rest of those suits wait face-down in columns 2-6
    behind a low card.
    """
    S, H, D, C = Suit.SPADES, Suit.HEARTS, Suit.DIAMONDS, Suit.CLUBS

    def column(suit, ranks):
        cards = [down(r, suit) for r in ranks]
        cards[-1].face_up = True
        return cards

    tableau = [
        [down(1, D), down(1, C), down(11, H), down(12, S), down(9, H), up(13, S)],
        [down(10, H), up(12, H), up(11, S)],
        column(D, [13, 12, 11, 10, 9, 8, 7]),
        column(D, [6, 5, 4]),
        column(D, [3, 2]),
        column(C, [13, 12, 11, 10, 9, 8, 7]),
        column(C, [6, 5, 4, 3, 2]),
    ]
    found = {
        S: [up(r, S) for r in range(1, 9)],
        H: [up(r, H) for r in range(1, 9)],
    }
    # drawn as 10♠, K♥, 9♠
    stock = [down(9, S), down(13, H), down(10, S)]
    return board_from_columns(tableau, stock=stock, found=found, draw_mode=draw_mode)
