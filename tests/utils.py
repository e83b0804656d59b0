from contextlib import contextmanager

from funcfeatures.core.tracker import Tracker, active_tracker


@contextmanager
def fresh_tracker():
    ''' Installs a new tracker for the duration of the block,
    then gives the instrumentation back to the previously active one.
    '''
    previous = active_tracker()
    tracker = Tracker()
    tracker.install()
    try:
        yield tracker
    finally:
        tracker.uninstall()
        if previous is not None:
            previous.install()
