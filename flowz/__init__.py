"""
`flowz` lets you build pipelines out of channel stages. Every stage runs on its own thread, reads from the channels of the stages before it and writes to channels it owns, closing them when it is done. Channels are bounded (by default an element is handed over directly from one stage to the next), so a slow consumer throttles every producer upstream of it.

Every stage constructor returns a `Receiver`, a read-only view of the stage output that you can iterate or feed to other stages:

```python
import flowz as fz

stage = fz.generate(range(10))
stage = fz.map(lambda x: x * 2, stage, maxsize=4)
stage = fz.filter(lambda x: x > 5, stage)

for x in stage:
    print(x) # 6, 8, 10, ..., 18
```

Called without their input, constructors return a `Partial` that can be reused or piped:

```python
data = range(10) | fz.map(lambda x: x * 2) | fz.take(3) | fz.collect # [0, 2, 4]
```

Every stage accepts a `done` signal, closing it stops the stage within one element and closes its outputs:

```python
import itertools

done = fz.Done()
stage = fz.generate(itertools.count(), done=done)

first = fz.collect(fz.take(5, stage))
done.close() # releases the source
```
"""

from .api.access import ReadMode, WriteMode, read_from, write_to
from .api.collect import buffer, collect, drop_all, drop_buffer, take_buffer
from .api.concat import concat
from .api.drop import drop, drop_while
from .api.fan_out import fan_out
from .api.filter import compact, filter
from .api.flatten import flatten
from .api.generate import generate, generator
from .api.map import map, peek
from .api.merge import merge
from .api.partition import partition
from .api.take import take, take_while
from .api.to_receiver import to_receiver
from .api.zip import unzip, zip
from .channel import Channel, OutputQueues, Receiver, Sender, readers, writers
from .done import Done, after, drained, every_done, some_done
from .stage import Stage
from .utils import (
    Cancelled,
    ChannelClosedError,
    EndOfStream,
    Namespace,
    Partial,
    start_workers,
)
from .worker import StageParams, Worker

__version__ = "0.1.0"
