"""Sharebox: image and video hosting with short URLs."""
