from PyQt5.QtWidgets import QPushButton, QSizePolicy


def createButton(text, slot, enabled=True, tooltip=None, object_name=None, parent=None):
    button = QPushButton(text, parent)
    button.setEnabled(enabled)
    # clicked(bool) would be passed on to slots that take an optional argument.
    button.clicked.connect(lambda checked=False: slot())
    button.setSizePolicy(QSizePolicy.Fixed, QSizePolicy.Fixed)
    if tooltip:
        button.setToolTip(tooltip)
    if object_name:
        button.setObjectName(object_name)
    return button
