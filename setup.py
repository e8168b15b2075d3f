#!/usr/bin/env python3
"""
Setup script for Gesture Gamepad
"""

from setuptools import setup, find_packages

setup(
    name="gesturepad",
    version="0.1.0",
    description="Turn face and hand landmarks into edge-triggered gamepad button presses",
    packages=find_packages(include=["gesturepad", "gesturepad.*"]),
    package_data={"gesturepad": ["config.default.yaml"]},
    python_requires=">=3.9",
    install_requires=[
        "numpy",
        "opencv-python",
        "mediapipe",
        "PyYAML",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "gesturepad=gesturepad.__main__:run",
        ],
    },
)
