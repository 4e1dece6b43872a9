"""
Tests for the interactive example selector.
"""

from vkguide.selection import select_example

EXAMPLES = ['buffer_creation', 'compute_pipeline', 'windowing']


def run(answer):
    executed, output = [], []
    result = select_example(EXAMPLES, executed.append, read=lambda: answer, write=output.append)
    return result, executed, output


class TestSelectExample:

    def test_lists_examples(self):
        _, _, output = run('')
        assert output[0] == 'Select example to run: (default 0)'
        assert output[1:] == ['0 buffer_creation', '1 compute_pipeline', '2 windowing']

    def test_empty_runs_first(self):
        result, executed, _ = run('\n')
        assert executed == ['buffer_creation']
        assert result == 'buffer_creation'

    def test_index(self):
        _, executed, _ = run(' 2 ')
        assert executed == ['windowing']

    def test_index_out_of_range(self):
        result, executed, output = run('3')
        assert result is None
        assert executed == []
        assert output[-1] == 'The given index "3" doesn\'t correspond to any known example'

    def test_name(self):
        _, executed, _ = run('compute_pipeline')
        assert executed == ['compute_pipeline']

    def test_unknown_name(self):
        result, executed, output = run('triangle')
        assert result is None
        assert executed == []
        assert output[-1] == '"triangle" doesn\'t correspond to any known example'
