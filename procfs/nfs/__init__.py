"""Parsers for the NFS client and server statistics under /proc/net/rpc."""