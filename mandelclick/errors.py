class MandelclickError(Exception):
    pass

class InvalidViewport(MandelclickError, ValueError):
    pass

class InvalidPixelWidth(MandelclickError, ValueError):
    pass
