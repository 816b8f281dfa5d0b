"""
Video Compare UI components.
"""

from .video_compare_tab import VideoCompareTab
from .main_window import MainWindow

__all__ = ['VideoCompareTab', 'MainWindow']
