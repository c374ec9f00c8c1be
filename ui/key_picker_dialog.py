from PyQt6.QtWidgets import (QDialog, QVBoxLayout, QHBoxLayout, QPushButton,
                            QLabel, QLineEdit, QListWidget, QListWidgetItem)
from PyQt6.QtCore import Qt, pyqtSignal

from i18n_keys.key_entry import filter_entries
from i18n_keys.key_lookup import KeyLookup
from utils.logging_setup import get_logger
from workers.refresh_worker import RefreshWorker

logger = get_logger("key_picker_dialog")


class KeyPickerDialog(QDialog):
    key_selected = pyqtSignal(str)  # Emitted with the rendered entry that was picked

    def __init__(self, key_lookup: KeyLookup, path: str, force_refresh=False, parent=None):
        super().__init__(parent)
        self.key_lookup = key_lookup
        self.path = path
        self.entries = []
        self.worker = None
        self.setWindowTitle("Insert Translation Key")
        self.setMinimumSize(700, 450)
        self.setup_ui()
        self.start_refresh(force_refresh)

    def setup_ui(self):
        layout = QVBoxLayout(self)

        self.status_label = QLabel("Loading translation keys...")
        self.status_label.setStyleSheet("font-weight: bold; font-size: 14px;")
        layout.addWidget(self.status_label)

        self.filter_edit = QLineEdit()
        self.filter_edit.setPlaceholderText("Type to filter keys and values")
        self.filter_edit.textChanged.connect(self.apply_filter)
        self.filter_edit.returnPressed.connect(self.handle_selection)
        layout.addWidget(self.filter_edit)

        self.list_widget = QListWidget()
        self.list_widget.setSelectionMode(QListWidget.SelectionMode.SingleSelection)
        self.list_widget.itemDoubleClicked.connect(self.handle_selection)
        layout.addWidget(self.list_widget)

        button_layout = QHBoxLayout()

        self.select_btn = QPushButton("Insert")
        self.select_btn.clicked.connect(self.handle_selection)
        self.select_btn.setEnabled(False)

        self.refresh_btn = QPushButton("Refresh")
        self.refresh_btn.clicked.connect(lambda: self.start_refresh(True))

        self.cancel_btn = QPushButton("Cancel")
        self.cancel_btn.clicked.connect(self.cancel)

        button_layout.addWidget(self.select_btn)
        button_layout.addWidget(self.refresh_btn)
        button_layout.addWidget(self.cancel_btn)
        layout.addLayout(button_layout)

        self.list_widget.itemSelectionChanged.connect(
            lambda: self.select_btn.setEnabled(bool(self.list_widget.selectedItems()))
        )

    def start_refresh(self, force_refresh):
        if self.worker is not None and self.worker.isRunning():
            return
        self.status_label.setText("Scanning translation files..." if force_refresh else "Loading translation keys...")
        self.refresh_btn.setEnabled(False)
        self.worker = RefreshWorker(self.key_lookup, self.path, force_refresh)
        self.worker.entries_ready.connect(self.set_entries)
        self.worker.cancelled.connect(self.handle_refresh_cancelled)
        self.worker.failed.connect(self.handle_refresh_failed)
        self.worker.start()

    def set_entries(self, entries):
        self.entries = entries
        self.refresh_btn.setEnabled(True)
        self.status_label.setText(f"{len(entries)} translation keys")
        self.apply_filter(self.filter_edit.text())

    def apply_filter(self, query):
        separator = self.key_lookup.settings.separator
        self.list_widget.clear()
        for entry in filter_entries(self.entries, query, separator):
            item = QListWidgetItem(entry.render(separator))
            item.setToolTip(entry.path)
            self.list_widget.addItem(item)
        if self.list_widget.count() > 0:
            self.list_widget.setCurrentRow(0)

    def handle_refresh_cancelled(self):
        self.refresh_btn.setEnabled(True)
        self.status_label.setText("Refresh cancelled, showing previous keys")

    def handle_refresh_failed(self, message):
        self.refresh_btn.setEnabled(True)
        self.status_label.setText(f"Refresh failed: {message}")

    def handle_selection(self):
        item = self.list_widget.currentItem()
        if item is None:
            return
        self.key_selected.emit(item.text())
        self.accept()

    def cancel(self):
        # A running scan is interrupted first; a second press closes the dialog
        if self.worker is not None and self.worker.isRunning():
            self.worker.cancel()
            return
        self.reject()

    def keyPressEvent(self, event):
        if event.key() == Qt.Key.Key_Escape:
            self.cancel()
            return
        super().keyPressEvent(event)

    def done(self, result):
        if self.worker is not None and self.worker.isRunning():
            self.worker.cancel()
            self.worker.wait()
        super().done(result)
