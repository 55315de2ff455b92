from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QTextEdit,
    QVBoxLayout,
    QWidget,
)

from subway_scribe.application.listening_controller import ListeningController
from subway_scribe.domain.vo.recording_session import RecordingSession, RecordingState
from subway_scribe.presentation.transcription_worker import TranscriptionWorker
from subway_scribe.utils.logger import Logger


class MainWindow(QMainWindow):
    log_line = Signal(str)

    def __init__(self, controller: ListeningController, logger: Logger):
        super().__init__()
        self.controller = controller
        self._worker: TranscriptionWorker | None = None

        self.setWindowTitle("Subway Scribe")
        self.resize(520, 560)

        self.record_button = QPushButton("Start listening")
        self.record_button.clicked.connect(self.on_toggle)

        self.status_label = QLabel("Tap to record an announcement.")
        self.status_label.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self.transcript_view = QTextEdit()
        self.transcript_view.setReadOnly(True)
        self.transcript_view.setPlaceholderText("Transcription will appear here.")

        self.speak_button = QPushButton("Speak")
        self.speak_button.clicked.connect(self.on_speak)
        self.play_button = QPushButton("Play recording")
        self.play_button.clicked.connect(self.on_play_recording)
        self.reset_button = QPushButton("Reset")
        self.reset_button.clicked.connect(self.on_reset)

        actions = QHBoxLayout()
        actions.addWidget(self.speak_button)
        actions.addWidget(self.play_button)
        actions.addWidget(self.reset_button)

        self.log_view = QTextEdit()
        self.log_view.setReadOnly(True)
        self.log_view.setMaximumHeight(140)

        layout = QVBoxLayout()
        layout.addWidget(self.record_button)
        layout.addWidget(self.status_label)
        layout.addWidget(self.transcript_view)
        layout.addLayout(actions)
        layout.addWidget(self.log_view)

        central = QWidget()
        central.setLayout(layout)
        self.setCentralWidget(central)

        # Logger lines may come from the worker thread; signals queue them.
        self.log_line.connect(self.log_view.append)
        logger.on_emit = self.log_line.emit

        self.statusBar().showMessage("Ready")
        self._refresh()

    def on_toggle(self) -> None:
        session = self.controller.toggle()
        if session.state is RecordingState.RECORDING:
            self.transcript_view.clear()
        self._render_session(session)
        self._refresh()

        if self.controller.needs_transcription():
            self._start_transcription()

    def on_speak(self) -> None:
        if not self.controller.speak():
            self.statusBar().showMessage("Nothing to speak.")

    def on_play_recording(self) -> None:
        error = self.controller.play_recording()
        if error:
            self.statusBar().showMessage(error)

    def on_reset(self) -> None:
        self.controller.reset()
        self.transcript_view.clear()
        self.status_label.setText("Tap to record an announcement.")
        self._refresh()

    def on_transcription_done(self, text: str) -> None:
        self.transcript_view.setPlainText(text)
        self.status_label.setText("Done.")
        self._refresh()

    def on_transcription_failed(self, text: str) -> None:
        # Empty text means the result was dropped after a reset; keep the cleared view.
        if text:
            self.transcript_view.setPlainText(text)
            self.status_label.setText("Done.")
        self._refresh()

    def _start_transcription(self) -> None:
        self.status_label.setText("Transcribing...")
        # The worker flags the submission itself; keep controls off until it reports back.
        self.record_button.setEnabled(False)
        self.play_button.setEnabled(False)
        worker = TranscriptionWorker(self.controller)
        worker.finished_with_text.connect(self.on_transcription_done)
        worker.failed.connect(self.on_transcription_failed)
        self._worker = worker
        worker.start()

    def _render_session(self, session: RecordingSession) -> None:
        if session.state is RecordingState.RECORDING:
            self.status_label.setText("Listening...")
        elif session.state is RecordingState.FAILED:
            self.status_label.setText(session.error_message or "Recording failed.")

    def _refresh(self) -> None:
        recording = self.controller.session.is_recording
        transcribing = self.controller.is_transcribing

        self.record_button.setText("Stop listening" if recording else "Start listening")
        self.record_button.setEnabled(not transcribing)
        self.speak_button.setEnabled(self.controller.can_speak)
        self.play_button.setEnabled(
            bool(self.controller.session.audio_handle) and not recording
        )
