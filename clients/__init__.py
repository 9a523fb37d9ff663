# Storage clients
from clients.local_kv_client import LocalKVClient, StorageError
from clients.valkey_client import ValkeyClient
