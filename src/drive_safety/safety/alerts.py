"""Alert sinks: visual banner output and spoken announcements."""

import logging
import subprocess
import sys
from typing import Optional

logger = logging.getLogger(__name__)


class SpeechAnnouncer:
    """
    Speak text through pyttsx3 in a child process.

    A new announcement terminates the one still playing; nothing is queued.
    Requires the optional 'voice' extra (pyttsx3).
    """

    SCRIPT = (
        "import pyttsx3\n"
        "engine = pyttsx3.init()\n"
        "engine.setProperty('rate', {rate})\n"
        "engine.say({text!r})\n"
        "engine.runAndWait()"
    )

    def __init__(self, rate: int = 150):
        self.rate = rate
        self._process: Optional[subprocess.Popen] = None

    def speak(self, text: str):
        text = (text or "").strip()
        if not text:
            return
        self.cancel()
        script = self.SCRIPT.format(rate=self.rate, text=text)
        try:
            self._process = subprocess.Popen([sys.executable, "-c", script])
        except OSError as e:
            logger.warning(f"Speech output failed: {e}")
            self._process = None

    def cancel(self):
        """Stop the announcement in flight, if any."""
        if self._process is not None and self._process.poll() is None:
            self._process.terminate()
            try:
                self._process.wait(timeout=1)
            except subprocess.TimeoutExpired:
                self._process.kill()
                self._process.wait()
        self._process = None


class AlertSink:
    """
    Receives alerts from the analyzer and the live tracker.

    show() and clear() drive the visual banner; speak() is only called
    when voice output is enabled.
    """

    def show(self, headline: str, detail: str):
        raise NotImplementedError

    def clear(self):
        raise NotImplementedError

    def speak(self, text: str):
        raise NotImplementedError


class ConsoleAlertSink(AlertSink):
    """Print alerts to stdout and forward speech to an optional announcer."""

    def __init__(self, announcer: Optional[SpeechAnnouncer] = None, stream=None):
        self.announcer = announcer
        self.stream = stream or sys.stdout
        self.current = None

    def show(self, headline: str, detail: str):
        self.current = (headline, detail)
        print(f"  ⚠  {headline}: {detail}", file=self.stream)

    def clear(self):
        if self.current is not None:
            print("  ✓  Clear", file=self.stream)
        self.current = None

    def speak(self, text: str):
        print(f"  🔊 {text}", file=self.stream)
        if self.announcer:
            self.announcer.speak(text)
