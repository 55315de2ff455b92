from __future__ import annotations

import sys
import time
from pathlib import Path


def _ensure_repo_root_on_sys_path() -> None:
    # Allow running both:
    # - python -m subway_scribe.main
    # - python subway_scribe/main.py
    if __package__:
        return
    repo_root = str(Path(__file__).resolve().parents[1])
    if repo_root not in sys.path:
        sys.path.insert(0, repo_root)


def main(argv: list[str] | None = None) -> int:
    _ensure_repo_root_on_sys_path()

    from subway_scribe.config import AppConfig
    from subway_scribe.di_container import build_container
    from subway_scribe.utils.args import parse_args
    from subway_scribe.utils.env import load_dotenv
    from subway_scribe.utils.logger import Logger

    args = parse_args(sys.argv[1:] if argv is None else argv)
    load_dotenv(args.env_file)

    try:
        config = AppConfig.from_env()
    except ValueError as exc:
        print(f"Config error: {exc}", file=sys.stderr)
        return 2

    headless = args.file is not None or args.record is not None
    logger = Logger(on_emit=_print_to_stderr if headless else None)
    container = build_container(config, logger=logger)

    try:
        if args.file is not None:
            return _transcribe_file(container, args.file, speak=args.speak)
        if args.record is not None:
            return _record_and_transcribe(container, args.record, speak=args.speak)
        return _run_window(container)
    finally:
        if args.save_log:
            logger.save()


def _transcribe_file(container, path: str, *, speak: bool) -> int:
    result = container.submitter.submit(path)
    print(result.display_text)
    if speak and result.ok:
        from subway_scribe.application.errors import ExternalServiceError

        try:
            _speak_text(container, result.text)
        except ExternalServiceError as exc:
            print(f"TTS error: {exc}", file=sys.stderr)
    return 0 if result.ok else 1


def _record_and_transcribe(container, seconds: float, *, speak: bool) -> int:
    controller = container.controller

    session = controller.toggle()
    if not session.is_recording:
        print(session.error_message, file=sys.stderr)
        return 1

    time.sleep(max(seconds, 0.0))
    session = controller.toggle()
    if session.error_message:
        print(session.error_message, file=sys.stderr)
        return 1

    result = controller.transcribe()
    if result is None:
        return 1
    print(result.display_text)

    if speak and controller.speak():
        _wait_for_playback(container)
    return 0 if result.ok else 1


def _speak_text(container, text: str | None) -> None:
    if not text or container.tts is None or container.audio_output is None:
        return
    audio = container.tts.synthesize(text)
    container.audio_output.play(audio, sample_rate=container.tts.sample_rate)
    _wait_for_playback(container)


def _wait_for_playback(container) -> None:
    from subway_scribe.infrastructure.audio.player import Player

    if isinstance(container.audio_output, Player):
        container.audio_output.wait()


def _run_window(container) -> int:
    from PySide6.QtWidgets import QApplication

    from subway_scribe.presentation.main_window import MainWindow

    app = QApplication(sys.argv)
    window = MainWindow(container.controller, container.logger)
    window.show()
    return app.exec()


def _print_to_stderr(line: str) -> None:
    print(line, file=sys.stderr)


if __name__ == "__main__":
    raise SystemExit(main())
