"""
Configuration settings for the garment try-on overlay.
"""

# Camera settings
CAMERA_CONFIG = {
    'camera_index': 0,
    'width': 1280,
    'height': 720,
    'target_fps': 30,
    'mirrored': True,  # show the feed like a mirror (landmarks are always mirror-view)
}

# Pose estimator settings (host side)
POSE_CONFIG = {
    'min_detection_confidence': 0.5,
    'min_tracking_confidence': 0.5,
    'visibility_threshold': 0.5,
}

# Gesture settings
GESTURE_CONFIG = {
    'head_turn_ratio': 0.3,  # fraction of eye distance the nose must pass
    'cooldown_seconds': 1.0,
}

# Garment rendering settings
RENDER_CONFIG = {
    'width_scale': 2.5,  # garment width relative to shoulder width
    'anchor_drop': 0.2,  # anchor offset below shoulders, fraction of torso height
    'fallback_radius': 20,
    'fallback_color': (128, 128, 128, 255),  # BGRA
    'fallback_style': 'marker',  # 'marker' or 'outline'
    'outline_alpha': 0.6,
    'invert_mirrored_rotation': False,
}

# Garment image assets
ASSET_CONFIG = {
    'asset_dir': 'garments',
    'extensions': ('png', 'webp', 'jpg'),
}

# Window / debug display
DISPLAY_CONFIG = {
    'window_name': 'Virtual Try-On',
    'show_skeleton': False,
}

# Garment shown when the session starts
SESSION_CONFIG = {
    'garment_type': 'shirt',
    'color': 'red',
}
