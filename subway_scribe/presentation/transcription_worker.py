from PySide6.QtCore import QThread, Signal

from subway_scribe.application.listening_controller import ListeningController


class TranscriptionWorker(QThread):
    finished_with_text = Signal(str)
    failed = Signal(str)

    def __init__(self, controller: ListeningController):
        super().__init__()
        self.controller = controller

    def run(self) -> None:
        try:
            result = self.controller.transcribe()
        except Exception as e:
            self.controller.logger.log(f"Unexpected error: {e}")
            self.failed.emit("(Transcription error)")
            return

        if result is None:
            self.failed.emit("")
            return
        self.finished_with_text.emit(result.display_text)
