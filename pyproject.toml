[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "enableit"
version = "0.1.0"
description = "Host-side building blocks for assistive-device firmware: HDLC framing and handshake, RTP packets, a byte buffer, FFTs, QR codes, EMG filters, an AES block cipher, console routing, a message protocol processor and a system info document."
requires-python = ">=3.10"
keywords = ["hdlc", "rtp", "fft", "qrcode", "emg", "filter", "aes", "embedded", "protocol", "console"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Embedded Systems",
    "Topic :: Scientific/Engineering :: Medical Science Apps.",
]
dependencies = [
    "cryptography",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["enableit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
