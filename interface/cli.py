import argparse
import sys
import time

from loguru import logger

from ziffi.config import CONFIG
from ziffi.controller import GameController, GameMode
from ziffi.core.pieces import Color
from ziffi.notation import move_to_uci, parse_move, render
from ziffi.storage import GameStore

HELP = "moves like c4d5 (d7d8n to promote), or: undo, redo, flip, swap, save, load <id>, help, quit"


def print_board(controller: GameController):
    print(render(controller.engine.board, controller.engine.is_flipped))
    status = controller.status()
    print(f"{status['message']}  (move {status['moveCounter']})")
    print("----------------------------")


def handle_command(controller: GameController, store: GameStore, line: str) -> bool:
    """Run one input line. Returns False when the session should end."""
    cmd, _, arg = line.strip().partition(" ")
    if cmd in ("quit", "exit", "q"):
        return False
    if cmd == "help":
        print(HELP)
    elif cmd == "undo":
        print("Undone." if controller.undo_move() else "Nothing to undo.")
    elif cmd == "redo":
        print("Redone." if controller.redo_move() else "Nothing to redo.")
    elif cmd == "flip":
        controller.flip_board()
    elif cmd == "swap":
        controller.swap_sides()
    elif cmd == "save":
        result = controller.save_current_game(store)
        print(f"Saved as {result.gameId}" if result.success else f"Save failed: {result.error}")
    elif cmd == "load":
        result = controller.load_game(store, arg.strip())
        print("Loaded." if result.success else f"Load failed: {result.error}")
    elif cmd:
        try:
            fr, fc, tr, tc, promotion = parse_move(cmd)
        except ValueError:
            print(f"Can't read {cmd!r}. {HELP}")
            return True
        if not controller.attempt_move(fr, fc, tr, tc, promotion):
            print("Illegal move, try again.")
    return True


def play_ai_turns(controller: GameController, delay: bool = True):
    while controller.is_ai_turn() and not controller.game_over:
        if delay:
            time.sleep(controller.think_delay())
        move = controller.ai_turn()
        if move is None:
            break
        print(f"{CONFIG.ui.engine_name} plays: {move_to_uci(move)}")
        print_board(controller)


def main(argv=None):
    parser = argparse.ArgumentParser(prog="ziffi", description=CONFIG.ui.engine_name)
    parser.add_argument("--mode", choices=[m.value for m in GameMode if m is not GameMode.ONLINE_TWO_PLAYER],
                        default=GameMode.HUMAN_VS_ENGINE.value)
    parser.add_argument("--difficulty", type=int, choices=range(6), default=CONFIG.ui.default_difficulty)
    parser.add_argument("--black", action="store_true", help="play the black pieces")
    parser.add_argument("--no-delay", action="store_true", help="skip the engine think delay")
    args = parser.parse_args(argv)

    logger.remove()
    logger.add(sys.stderr, level=CONFIG.log_level)

    controller = GameController(mode=GameMode(args.mode), difficulty=args.difficulty)
    controller.start_game()
    if args.black:
        controller.player_colors = {"human": Color.BLACK, "ai": Color.WHITE}
        controller.flip_board()
    store = GameStore()

    print_board(controller)
    try:
        while True:
            play_ai_turns(controller, delay=not args.no_delay)
            if controller.game_over and controller.mode is GameMode.ENGINE_VS_ENGINE:
                break
            line = input("> ")
            if not handle_command(controller, store, line):
                break
            print_board(controller)
    except (EOFError, KeyboardInterrupt):
        print()

    totals = controller.engine.get_material_totals()
    print("Game Over")
    print(f"Result: {controller.status()['message']}  (White {totals[Color.WHITE]} - Black {totals[Color.BLACK]})")


if __name__ == "__main__":
    main()
