import pytest


@pytest.fixture
def minimal_problem_html():
    return """
    <span id="problem_title">Hello World</span>
    <div id="problem_description"><p>Print <code>Hello World!</code>.</p></div>
    <div id="problem_input"><p>None.</p></div>
    <div id="problem_output"><p>Hello World!</p></div>
    """


@pytest.fixture
def labelled_samples_html():
    return """
    <span id="problem_title">Sum</span>
    <div id="problem_description"><p>Add numbers.</p></div>
    <div class="samples">
        <h2>Sample Input</h2>
        <pre>3
1 2 3</pre>
        <pre>6</pre>
    </div>
    """


@pytest.fixture
def search_row_html():
    return """
    <table><tbody>
        <tr><td>1000</td><td>A+B</td></tr>
    </tbody></table>
    """
