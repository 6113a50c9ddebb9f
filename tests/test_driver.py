import numpy as np
import pytest

from volwarp.driver import main
from volwarp.io import VolumeReader, VolumeWriter
from volwarp.resample import resample
from volwarp.space import composite_transform


@pytest.fixture
def input_file(tmp_path, noise):
    return VolumeWriter().write(noise, str(tmp_path / 'input.nii.gz'))


@pytest.mark.parametrize('argv', [[], ['in.nii'], ['a', 'b', 'c']])
def test_wrong_number_of_arguments(argv, capsys):
    assert main(argv, prog='volwarp') == 1
    err = capsys.readouterr().err
    assert err.startswith('Using: volwarp <InputFileName> <OutputFileName>')
    assert 'Error:' in err


def test_run(tmp_path, input_file, noise):
    output_file = str(tmp_path / 'output.nii.gz')
    assert main([input_file, output_file]) == 0
    output = VolumeReader().read(output_file)
    source = VolumeReader().read(input_file)
    expected = resample(source, composite_transform(source.size))
    assert output.dtype == np.uint8
    assert np.array_equal(output.data, expected.data)
    assert np.allclose(output.origin, noise.origin)
    assert np.allclose(output.spacing, noise.spacing)


def test_identity_parameters(tmp_path, input_file, noise):
    output_file = str(tmp_path / 'output.nii.gz')
    argv = [input_file, output_file, '--translation', '0', '0', '0',
            '--scale', '1', '1', '1', '--angle', '0']
    assert main(argv) == 0
    assert np.array_equal(VolumeReader().read(output_file).data, noise.data)


def test_parallel_run(tmp_path, input_file):
    out1 = str(tmp_path / 'out1.nii.gz')
    out2 = str(tmp_path / 'out2.nii.gz')
    assert main([input_file, out1]) == 0
    assert main([input_file, out2, '-j', '2']) == 0
    assert np.array_equal(VolumeReader().read(out1).data,
                          VolumeReader().read(out2).data)


def test_missing_input(tmp_path, capsys):
    argv = [str(tmp_path / 'missing.nii.gz'), str(tmp_path / 'out.nii.gz')]
    assert main(argv) == 1
    assert capsys.readouterr().err.startswith('Error:')


def test_unwritable_output(tmp_path, input_file, capsys):
    argv = [input_file, str(tmp_path / 'nodir' / 'out.nii.gz')]
    assert main(argv) == 1
    assert capsys.readouterr().err.startswith('Error:')


def test_invalid_scale(tmp_path, input_file, capsys):
    argv = [input_file, str(tmp_path / 'out.nii.gz'),
            '--scale', '1', '0', '1']
    assert main(argv) == 1
    assert capsys.readouterr().err.startswith('Error:')


def test_verbose(tmp_path, input_file, capsys):
    argv = [input_file, str(tmp_path / 'out.nii.gz'), '--verbose']
    assert main(argv) == 0
    out = capsys.readouterr().out
    assert out.startswith('File: ')
    assert 'center:' in out
    assert 'Output: ' in out


def test_empty_archive(tmp_path, capsys):
    fname = str(tmp_path / 'empty.npz')
    np.savez(fname)
    assert main([fname, str(tmp_path / 'out.nii.gz')]) == 1
    assert capsys.readouterr().err.startswith('Error:')
