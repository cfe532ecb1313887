"""wechat-libot: fixed-text auto-replies for WeChat direct messages."""

__version__ = "0.1.0"
