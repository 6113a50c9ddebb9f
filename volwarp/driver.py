"""Command line driver: read a volume, warp it, write it."""

import os.path
import sys
from argparse import ArgumentParser
import numpy as np
from .errors import VolwarpError, ArgumentError
from .io import VolumeReader, VolumeWriter
from .resample import Resampler
from .space.functional import composite_transform, center_modes, \
    default_translation, default_scale, default_axis, default_angle


class _Parser(ArgumentParser):
    """Argument parser that raises instead of exiting."""

    def error(self, message):
        raise ArgumentError(message)


def usage(prog):
    return 'Using: {} <InputFileName> <OutputFileName>'.format(prog)


def build_parser(prog='volwarp'):
    parser = _Parser(prog=prog,
                     description='Warp a 3D volume through a composite '
                                 'affine transform (translation, scaling '
                                 'and rotation about the volume center).')
    parser.add_argument('input', metavar='InputFileName',
                        help='Input volume')
    parser.add_argument('output', metavar='OutputFileName',
                        help='Output volume')
    parser.add_argument('--translation', nargs=3, type=float,
                        default=list(default_translation),
                        metavar=('X', 'Y', 'Z'),
                        help='Translation [default: 6 2 4]')
    parser.add_argument('--scale', nargs=3, type=float,
                        default=list(default_scale),
                        metavar=('SX', 'SY', 'SZ'),
                        help='Scaling factors [default: 0.5 0.75 0.9]')
    parser.add_argument('--axis', nargs=3, type=float,
                        default=list(default_axis),
                        metavar=('X', 'Y', 'Z'),
                        help='Rotation axis [default: 1 0 0]')
    parser.add_argument('--angle', type=float, default=default_angle,
                        metavar='DEG',
                        help='Rotation angle in degrees [default: 60]')
    parser.add_argument('--center-mode', choices=center_modes,
                        default='size', dest='center_mode',
                        help='Rotation center: half the size, or the '
                             'physical center [default: size]')
    parser.add_argument('--order', type=int, default=1,
                        help='Interpolation order [default: 1]')
    parser.add_argument('--default', type=float, default=0.,
                        dest='default_value', metavar='VALUE',
                        help='Out-of-bounds value [default: 0]')
    parser.add_argument('--jobs', '-j', type=int, default=1,
                        dest='n_jobs', metavar='N',
                        help='Number of threads [default: 1]')
    parser.add_argument('--verbose', '-v', default=False,
                        action='store_true',
                        help='Print geometry and transform')
    return parser


def print_field(name, value, field_len=12):
    repr_value = '{}'.format(value).split('\n')
    for n_line in range(1, len(repr_value)):
        pad = ' ' * (field_len+1)
        repr_value[n_line] = '\t' + pad + repr_value[n_line]
    repr_value = '\n'.join(repr_value)
    print(('\t{:' + str(field_len) + 's} {}').format(name + ':', repr_value))


def main(argv=None, prog=None):
    """Run the command line driver.

    Parameters
    ----------
    argv : list[str], default=sys.argv[1:]
    prog : str, default=basename of sys.argv[0]

    Returns
    -------
    status : int
        0 on success, 1 on failure.

    """
    if prog is None:
        prog = os.path.basename(sys.argv[0]) if sys.argv else 'volwarp'
    parser = build_parser(prog)
    try:
        args = parser.parse_args(argv)
    except ArgumentError as e:
        print(usage(prog), file=sys.stderr)
        print('Error: {}'.format(e), file=sys.stderr)
        return 1

    try:
        image = VolumeReader(dtype=np.uint8).read(args.input)
        transform = composite_transform(image.size, image.origin,
                                        image.spacing,
                                        translation=args.translation,
                                        scale=args.scale,
                                        axis=args.axis,
                                        angle=args.angle,
                                        center_mode=args.center_mode)
        if args.verbose:
            print('File: {}'.format(args.input))
            print_field('size', image.size)
            print_field('origin', image.origin)
            print_field('spacing', image.spacing)
            print_field('center', transform.center)
            print_field('affine', transform.affine_map.homogeneous)
        resampler = Resampler(transform, order=args.order,
                              default_value=args.default_value,
                              n_jobs=args.n_jobs)
        output = resampler(image)
        fname = VolumeWriter().write(output, args.output)
        if args.verbose:
            print('Output: {}'.format(fname))
    except (VolwarpError, ValueError) as e:
        print('Error: {}'.format(e), file=sys.stderr)
        return 1
    return 0
