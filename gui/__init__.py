__all__ = ["GraphWidget", "MainWindow"]

from .graph_widget import GraphWidget
from .main_window import MainWindow
