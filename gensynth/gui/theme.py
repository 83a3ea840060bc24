"""
Theme - Centralized color and style definitions
All UI components reference this for consistent styling
"""
import platform

SKIN = {
    # Backgrounds (darkest to lightest)
    'bg_dark': '#0d0d0d',
    'bg_mid': '#1a1a1a',
    'bg_light': '#242424',
    'bg_highlight': '#2e2e2e',

    # Borders
    'border_dark': '#2a2a2a',
    'border_light': '#4a4a4a',

    # Text
    'text_dim': '#606060',
    'text_mid': '#909090',
    'text_bright': '#d0d0d0',

    # Canvas
    'canvas_bg': '#ffffff',

    # Range control
    'track': '#2a2a2a',
    'track_span': '#3f6f55',
    'handle_bound': '#909090',
    'handle_current': '#00ff66',
    'handle_focus': '#ffffff',

    # Modulation button
    'mod_off': '#3a3a3a',
    'mod_on': '#00ccff',

    # States
    'state_enabled_bg': '#1a5a2a',
    'state_enabled_text': '#00ff66',
    'state_enabled_hover': '#2a6a3a',
    'state_disabled_bg': '#242424',
    'state_disabled_text': '#909090',

    # Fonts
    'font_family': 'Helvetica' if platform.system() == 'Darwin' else 'Arial',
    'font_mono': 'Menlo' if platform.system() == 'Darwin' else 'Courier New',
    'font_size_title': 14,
    'font_size_label': 10,
    'font_size_small': 9,
}


def get(key, default='#ff00ff'):
    """Get value from the skin. Magenta = missing key."""
    return SKIN.get(key, default)


FONT_FAMILY = get('font_family')
MONO_FONT = get('font_mono')

FONT_SIZES = {
    'title': get('font_size_title'),
    'label': get('font_size_label'),
    'small': get('font_size_small'),
}

COLORS = {
    'background': get('bg_mid'),
    'background_dark': get('bg_dark'),
    'background_light': get('bg_light'),
    'background_highlight': get('bg_highlight'),
    'border': get('border_dark'),
    'border_light': get('border_light'),
    'text': get('text_mid'),
    'text_bright': get('text_bright'),
    'text_dim': get('text_dim'),
    'canvas': get('canvas_bg'),
    'track': get('track'),
    'track_span': get('track_span'),
    'handle_bound': get('handle_bound'),
    'handle_current': get('handle_current'),
    'handle_focus': get('handle_focus'),
    'mod_off': get('mod_off'),
    'mod_on': get('mod_on'),
    'enabled': get('state_enabled_bg'),
    'enabled_text': get('state_enabled_text'),
    'enabled_hover': get('state_enabled_hover'),
    'disabled': get('state_disabled_bg'),
    'disabled_text': get('state_disabled_text'),
}

# Geometry
PANEL_WIDTH = 300
RANGE_CONTROL_HEIGHT = 18


def button_style(state='disabled'):
    """Get button stylesheet for state: enabled, disabled."""
    if state == 'enabled':
        return f"""
            QPushButton {{
                background-color: {COLORS['enabled']};
                color: {COLORS['enabled_text']};
                border-radius: 3px;
                padding: 3px 8px;
            }}
            QPushButton:hover {{
                background-color: {COLORS['enabled_hover']};
            }}
        """
    return f"""
        QPushButton {{
            background-color: {COLORS['disabled']};
            color: {COLORS['disabled_text']};
            border-radius: 3px;
            padding: 3px 8px;
        }}
    """


def line_edit_style():
    return f"""
        QLineEdit {{
            background-color: {COLORS['background_dark']};
            color: {COLORS['text_bright']};
            border: 1px solid {COLORS['border_light']};
            border-radius: 3px;
            padding: 1px 4px;
        }}
    """


def panel_style():
    return f"""
        QWidget {{
            background-color: {COLORS['background']};
            color: {COLORS['text']};
        }}
    """
