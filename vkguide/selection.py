def select_example(examples, execute, read=input, write=print):
    """Ask which example to run and run it.

    An empty answer runs the first example. Otherwise the answer is taken as an
    index when it is all digits, else as an example name. Returns the chosen
    name, or None when the answer matched nothing.
    """
    write('Select example to run: (default 0)')
    for i, example in enumerate(examples):
        write(f'{i} {example}')

    selection = read().strip()
    if not selection:
        execute(examples[0])
        return examples[0]

    if selection.isdigit():
        i = int(selection)
        if i >= len(examples):
            write(f'The given index "{selection}" doesn\'t correspond to any known example')
            return None
        execute(examples[i])
        return examples[i]

    if selection in examples:
        execute(selection)
        return selection
    write(f'"{selection}" doesn\'t correspond to any known example')
    return None
