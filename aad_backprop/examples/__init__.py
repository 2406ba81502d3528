# aad_backprop/examples/__init__.py
