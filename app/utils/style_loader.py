def load_stylesheet():
    """Loads the application's QSS stylesheet with a dark theme."""

    # Dark Theme Color Palette
    dark_bg_color = "#2b2b2b"
    dark_widget_bg_color = "#3c3f41"
    dark_text_color = "#dcdcdc"
    dark_border_color = "#555555"
    dark_accent_color = "#0078d4"
    dark_button_text_color = "#ffffff"
    dark_disabled_text_color = "#888888"
    dark_disabled_bg_color = "#4a4a4a"
    dark_hover_bg_color = "#4f5254"
    dark_pressed_bg_color = "#5a5e60"
    dark_tab_bg_color = "#313335"
    dark_header_bg_color = "#383838"
    dark_error_color = "#e06c75"

    standard_control_height = "19px"
    input_field_padding = "3px 5px"
    button_padding = "0px 10px"
    limit_box_width = "70px"

    return f"""
        QMainWindow {{
            background-color: {dark_bg_color};
            border: 2px solid {dark_accent_color};
        }}

        QWidget {{
            font-size: 14px;
            color: {dark_text_color};
            background-color: {dark_bg_color};
        }}

        QDialog {{
            background-color: {dark_bg_color};
        }}

        QLabel {{
            font-size: 13px;
            color: {dark_text_color};
            padding: 5px 10px;
            background-color: transparent;
            min-height: {standard_control_height};
        }}

        QLabel#TableLoadingError {{
            color: {dark_error_color};
            font-weight: bold;
            border: 1px solid {dark_error_color};
            border-radius: 4px;
        }}

        QLineEdit,
        QComboBox {{
            border: 1px solid {dark_border_color};
            border-radius: 4px;
            font-size: 13px;
            padding: {input_field_padding};
            margin: 2px 0;
            min-height: {standard_control_height};
            background-color: {dark_widget_bg_color};
            color: {dark_text_color};
        }}

        QLineEdit#TableSearch, QLineEdit#LogSearch {{
            min-width: 240px;
        }}

        QComboBox {{
            padding-right: 2px;
            min-width: {limit_box_width};
            max-width: {limit_box_width};
        }}

        QLineEdit:focus, QComboBox:focus {{
            border: 1px solid {dark_accent_color};
        }}

        QComboBox QAbstractItemView {{
            background-color: {dark_widget_bg_color};
            color: {dark_text_color};
            border: 1px solid {dark_border_color};
            selection-background-color: {dark_accent_color};
            selection-color: {dark_button_text_color};
        }}

        QTextEdit {{
            border: 1px solid {dark_border_color};
            border-radius: 4px;
            padding: 5px;
            background-color: {dark_widget_bg_color};
            color: {dark_text_color};
        }}
        QTextEdit#LogDisplay {{
            background-color: #212121;
            color: #c0c0c0;
        }}

        QPushButton {{
            background-color: {dark_accent_color};
            color: {dark_button_text_color};
            border-radius: 4px;
            padding: {button_padding};
            margin: 4px 2px;
            font-size: 13px;
            font-weight: bold;
            border: 1px solid #005a9e;
            min-width: 100px;
            height: 25px;
            min-height: 25px;
        }}
        QPushButton:hover {{
            background-color: #005a9e;
        }}
        QPushButton:pressed {{
            background-color: #004578;
        }}
        QPushButton:disabled {{
            background-color: {dark_disabled_bg_color};
            color: {dark_disabled_text_color};
            border: 1px solid {dark_border_color};
        }}

        QToolButton {{
            background-color: {dark_widget_bg_color};
            border: 1px solid {dark_border_color};
            border-radius: 4px;
            padding: 3px 10px;
            margin: 4px 2px;
            font-size: 13px;
        }}
        QToolButton:hover {{
            background-color: {dark_hover_bg_color};
        }}
        QToolButton:pressed {{
            background-color: {dark_pressed_bg_color};
        }}

        QTabWidget::pane {{
            border: 1px solid {dark_border_color};
            border-top: 2px solid {dark_accent_color};
        }}
        QTabBar::tab {{
            background: {dark_tab_bg_color};
            border: 1px solid {dark_border_color};
            border-bottom: none;
            border-top-left-radius: 4px;
            border-top-right-radius: 4px;
            min-width: 8ex;
            padding: 5px 10px;
            margin-right: 2px;
            color: {dark_text_color};
        }}
        QTabBar::tab:selected {{
            background: {dark_widget_bg_color};
            border-color: {dark_accent_color};
            border-bottom-color: {dark_widget_bg_color};
            color: #ffffff;
        }}
        QTabBar::tab:hover {{
            background: {dark_hover_bg_color};
        }}
        QTabBar::tab:!selected {{
            margin-top: 2px;
        }}

        QHeaderView::section {{
            background-color: {dark_header_bg_color};
            color: {dark_text_color};
            padding: 4px;
            border: 1px solid {dark_border_color};
            font-weight: bold;
        }}
        QHeaderView::down-arrow, QHeaderView::up-arrow {{
            width: 10px;
            height: 10px;
        }}
        QTableView {{
            gridline-color: {dark_border_color};
            background-color: {dark_widget_bg_color};
            color: {dark_text_color};
            alternate-background-color: #313335;
            selection-background-color: {dark_accent_color};
            selection-color: {dark_button_text_color};
        }}

        QStatusBar {{
            background-color: {dark_header_bg_color};
            border-top: 1px solid {dark_border_color};
            color: {dark_text_color};
        }}
        QStatusBar::item {{
            border: none;
        }}

        QScrollBar:vertical {{
            border: 1px solid {dark_border_color};
            background: {dark_widget_bg_color};
            width: 12px;
            margin: 0px;
        }}
        QScrollBar::handle:vertical {{
            background: #6e6e6e;
            min-height: 20px;
            border-radius: 3px;
        }}
        QScrollBar::add-line:vertical, QScrollBar::sub-line:vertical {{
            border: none;
            background: none;
            height: 0px;
        }}
        QScrollBar:horizontal {{
            border: 1px solid {dark_border_color};
            background: {dark_widget_bg_color};
            height: 12px;
            margin: 0px;
        }}
        QScrollBar::handle:horizontal {{
            background: #6e6e6e;
            min-width: 20px;
            border-radius: 3px;
        }}
        QScrollBar::add-line:horizontal, QScrollBar::sub-line:horizontal {{
            border: none;
            background: none;
            width: 0px;
        }}

        QMenu {{
            background-color: {dark_widget_bg_color};
            color: {dark_text_color};
            border: 1px solid {dark_border_color};
        }}
        QMenu::item {{
            padding: 5px 20px 5px 20px;
        }}
        QMenu::item:selected {{
            background-color: {dark_accent_color};
            color: {dark_button_text_color};
        }}
        QMenu::item:disabled {{
            color: {dark_disabled_text_color};
        }}
        QMenu::separator {{
            height: 1px;
            background: {dark_border_color};
            margin-left: 5px;
            margin-right: 5px;
        }}
        QMenuBar {{
            background-color: {dark_header_bg_color};
            color: {dark_text_color};
        }}
        QMenuBar::item {{
            background: transparent;
            padding: 4px 8px;
        }}
        QMenuBar::item:selected {{
            background: {dark_accent_color};
            color: {dark_button_text_color};
        }}
        QMenuBar::item:pressed {{
            background: {dark_pressed_bg_color};
        }}

        QMessageBox {{
            min-width: 225px;
        }}
        QMessageBox QLabel {{
            min-width: 225px;
            qproperty-alignment: 'AlignLeft';
            padding: 1px 1px;
            qproperty-wordWrap: true;
        }}
    """
