"""autosftp: mirror a local directory onto a remote one over SFTP"""
__version__ = "0.1.0"
