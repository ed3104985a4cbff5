# cobbler/ui/main_window.py
from PySide6.QtCore import Qt, QTimer, QUrl
from PySide6.QtGui import QDesktopServices
from PySide6.QtMultimedia import QAudioOutput, QMediaPlayer
from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
    QLabel, QPushButton, QProgressBar, QSlider
)

from cobbler.core.debug import debug_log
from cobbler.core.models import NowPlayingEntry
from cobbler.core.queue_feed import QueuePoller
from cobbler.core.timefmt import format_seconds
from .settings import load_volume, save_volume

STREAM_URL = "https://scenestream.io/necta48.aac"
TICK_MS = 1000

BG = "#1f2430"
ACCENT = "#8fb3ff"


class MainWindow(QMainWindow):
    def __init__(self, queue: QueuePoller = None, settings_path=None, stream_url: str = STREAM_URL):
        super().__init__()

        self.setWindowTitle("Cobbler")
        self.setMinimumSize(300, 100)
        self.setMaximumSize(400, 200)

        self._settings_path = settings_path
        self._volume = load_volume(settings_path)

        self.queue = queue or QueuePoller.load()
        self.queue.subscribe(self._on_now_playing)

        root = QWidget()
        root.setObjectName("Root")
        self.setCentralWidget(root)
        self._build_layout(root)

        self._apply_styles()

        # Stream playback
        self.audio_output = QAudioOutput(self)
        self.audio_output.setVolume(self._volume / 100.0)
        self.player = QMediaPlayer(self)
        self.player.setAudioOutput(self.audio_output)
        self.player.errorOccurred.connect(self._on_player_error)
        self.player.setSource(QUrl(stream_url))

        self._on_now_playing(self.queue.now_playing)
        self._render(self.queue.now_playing)

        self._timer = QTimer(self)
        self._timer.timeout.connect(self._on_tick)
        self._timer.start(TICK_MS)

    # ==================================================
    # LAYOUT
    # ==================================================

    def _build_layout(self, root: QWidget):
        v = QVBoxLayout(root)
        v.setContentsMargins(14, 10, 14, 10)
        v.setSpacing(4)

        song_row = QHBoxLayout()
        self.d_song = QLabel("")
        self.d_song.setObjectName("SongTitle")
        self.song_link = self._link_button(self._open_song)
        song_row.addStretch()
        song_row.addWidget(self.d_song)
        song_row.addWidget(self.song_link)
        song_row.addStretch()

        artist_row = QHBoxLayout()
        self.d_artist = QLabel("")
        self.d_artist.setObjectName("ArtistName")
        self.artist_link = self._link_button(self._open_artist)
        artist_row.addStretch()
        artist_row.addWidget(self.d_artist)
        artist_row.addWidget(self.artist_link)
        artist_row.addStretch()

        self.d_requester = QLabel("")
        self.d_requester.setObjectName("Requester")
        self.d_requester.setAlignment(Qt.AlignCenter)

        self.d_progress = QProgressBar()
        self.d_progress.setObjectName("TrackProgress")
        self.d_progress.setRange(0, 1000)
        self.d_progress.setValue(0)
        self.d_progress.setTextVisible(False)
        self.d_progress.setFixedHeight(6)

        time_row = QHBoxLayout()
        time_row.setSpacing(16)

        self.d_duration = QLabel("0:00")
        self.d_duration.setObjectName("TimeText")

        self.d_time_left = QLabel("0:00")
        self.d_time_left.setObjectName("TimeText")

        self.volume_slider = QSlider(Qt.Horizontal)
        self.volume_slider.setRange(0, 100)
        self.volume_slider.setValue(self._volume)
        self.volume_slider.valueChanged.connect(self._on_volume_changed)

        quiet = QLabel("🔈")
        loud = QLabel("🔊")

        volume_row = QHBoxLayout()
        volume_row.setSpacing(6)
        volume_row.addWidget(quiet)
        volume_row.addWidget(self.volume_slider, 1)
        volume_row.addWidget(loud)

        time_row.addWidget(self.d_duration, 0, Qt.AlignLeft)
        time_row.addLayout(volume_row, 1)
        time_row.addWidget(self.d_time_left, 0, Qt.AlignRight)

        v.addLayout(song_row)
        v.addLayout(artist_row)
        v.addWidget(self.d_requester)
        v.addWidget(self.d_progress)
        v.addLayout(time_row)

    def _link_button(self, slot) -> QPushButton:
        btn = QPushButton("↗")
        btn.setObjectName("LinkButton")
        btn.setFlat(True)
        btn.setCursor(Qt.PointingHandCursor)
        btn.setFixedSize(22, 22)
        btn.clicked.connect(slot)
        return btn

    # ==================================================
    # QUEUE HOOKUP
    # ==================================================

    def _on_tick(self):
        # collects a finished fetch (which may call _on_now_playing) first
        entry = self.queue.tick()
        self._render(entry)

    def _on_now_playing(self, entry: NowPlayingEntry):
        self.d_song.setText(entry.song)
        self.d_song.setToolTip(entry.song)
        self.d_artist.setText(entry.artist)
        self.d_artist.setToolTip(entry.artist)
        self.d_requester.setText(f"requested by: {entry.requester}")
        self.d_duration.setText(format_seconds(entry.song_duration))
        self.song_link.setToolTip(entry.song_url)
        self.artist_link.setToolTip(entry.artist_url)

    def _render(self, entry: NowPlayingEntry):
        self.d_progress.setValue(int(entry.progress * 1000))
        self.d_time_left.setText(format_seconds(entry.time_left))

    def _open_song(self):
        QDesktopServices.openUrl(QUrl(self.queue.now_playing.song_url))

    def _open_artist(self):
        QDesktopServices.openUrl(QUrl(self.queue.now_playing.artist_url))

    # ==================================================
    # PLAYBACK
    # ==================================================

    def showEvent(self, event):
        super().showEvent(event)
        if self.player.playbackState() != QMediaPlayer.PlayingState:
            self.player.play()

    def _on_volume_changed(self, value: int):
        self._volume = value
        self.audio_output.setVolume(value / 100.0)
        save_volume(value, self._settings_path)

    def _on_player_error(self, error, message: str = ""):
        debug_log(f"Stream error {error}: {message}")

    # ==================================================
    # CLEAN SHUTDOWN
    # ==================================================

    def closeEvent(self, event):
        self._timer.stop()
        self.player.stop()
        self.queue.unsubscribe(self._on_now_playing)
        self.queue.shutdown()
        event.accept()

    # ==================================================
    # STYLES
    # ==================================================

    def _apply_styles(self):
        self.setStyleSheet(f"""
            QWidget {{
                color: white;
                font-family: -apple-system, BlinkMacSystemFont,
                             "Segoe UI", Inter, Arial;
            }}

            QMainWindow, QWidget#Root {{
                background-color: {BG};
            }}

            QLabel {{
                background: transparent;
            }}

            QLabel#SongTitle {{
                font-size: 15px;
                font-weight: 800;
            }}

            QLabel#ArtistName {{
                font-size: 13px;
                color: rgba(255,255,255,0.90);
            }}

            QLabel#Requester {{
                font-size: 10px;
                color: rgba(255,255,255,0.70);
            }}

            QPushButton#LinkButton {{
                color: {ACCENT};
                border: 0px;
                font-size: 13px;
            }}

            QProgressBar#TrackProgress {{
                background-color: rgba(255,255,255,0.22);
                border: 0px;
                border-radius: 3px;
            }}

            QProgressBar#TrackProgress::chunk {{
                background-color: {ACCENT};
                border-radius: 3px;
            }}

            QLabel#TimeText {{
                font-size: 11px;
                color: rgba(255,255,255,0.75);
            }}
        """)
