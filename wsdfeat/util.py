'''
General-purpose classes and functions
'''

import enum
import itertools
# pylint: disable=too-few-public-methods


class ConfigEnum(enum.Enum):
    '''
    An enumeration that can be read back from the strings found
    in configuration files
    '''
    @classmethod
    def choices_str(cls):
        "available choices in this enumeration"
        return ",".join(sorted(x.name for x in cls))

    @classmethod
    def from_string(cls, string):
        "from configuration value"
        names = {x.name: x for x in cls}
        value = names.get(string)
        if value is not None:
            return value
        else:
            oops = "invalid choice: {}, choose from {}"
            raise ValueError(oops.format(string, cls.choices_str()))


def truncate(text, width):
    """
    Truncate a string and append an ellipsis if truncated
    """
    return text if len(text) < width else text[:width] + '...'


def concat_i(iters):
    """
    Merge an iterable of iterables into a single iterable
    """
    return itertools.chain.from_iterable(iters)


def concat_l(iters):
    """
    Merge an iterable of iterables into a list
    """
    return list(concat_i(iters))
