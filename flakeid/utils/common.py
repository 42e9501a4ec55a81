class Object(dict):
    def __setattr__(self, key, value):
        self[key] = value

    def __getattr__(self, key):
        return self.get(key, None)

    def __delattr__(self, key):
        try:
            del self[key]
        except KeyError:
            raise AttributeError(f"'Object' object has no attribute '{key}'")

    def __getstate__(self):
        """to fix pickle.dumps"""
        return dict(self)

    def __setstate__(self, state):
        self.update(state)


def chainMap(*dicts):
    """Merge dicts left to right, a later None never hides an earlier value."""
    merged_dict = Object()
    for d in dicts:
        for key, value in d.items():
            if key not in merged_dict or value is not None:
                merged_dict[key] = value
    return merged_dict
