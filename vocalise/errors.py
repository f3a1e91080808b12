class ConfigurationError (ValueError):

	"""
	Raised for an exercise, rhythm, tempo or vocal part that cannot be played.

	Raised synchronously by expansion, scheduling and ``Trainer.play()`` so the
	caller can correct its input. It subclasses ``ValueError`` so code that
	already guards against bad values keeps working.
	"""
