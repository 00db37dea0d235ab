"""
tuidesigner core: design IR, validation and errors.
"""
