#!/usr/bin/env python3
"""Profile htmliterator to find performance bottlenecks."""

import cProfile
import io
import pstats

from htmliterator import HtmlIterator, IteratorOpts, RecordingObserver

# Sample HTML
html = """
<!DOCTYPE html>
<html>
<head><title>Test</title><style>p > a { color: red }</style></head>
<body>
    <div class="container main">
        <p>Paragraph <b>1</b><br>continued</p>
        <p>Paragraph 2 &amp; a < b</p>
        <table>
            <tr><td>Cell 1</td><td>Cell 2</td></tr>
            <tr><td>Cell 3<td>Cell 4</tr>
        </table>
        <img src="a.png" alt="">
    </div>
    <script>if (a < b) { document.write("</div>"); }</script>
</body>
</html>
""" * 100  # Repeat for more meaningful results

sink = RecordingObserver()
iterator = HtmlIterator(sink, opts=IteratorOpts(collapse_whitespace=True))

# Profile
pr = cProfile.Profile()
pr.enable()

for _ in range(10):
    iterator.set_content(html)
    iterator.iterate()
    sink.drain()

pr.disable()

# Print stats
s = io.StringIO()
ps = pstats.Stats(pr, stream=s).sort_stats("cumulative")
ps.print_stats(50)  # Top 50 functions
print(s.getvalue())
