"""Key/value storage: stores, buckets, vector-like buckets and key/value row encoding."""