from unittest.mock import MagicMock, patch

from strength_rank import worker


@patch('strength_rank.worker.FailedJobRegistry')
def test_requeue_failed_jobs_puts_each_job_back(mock_registry_cls):
    registry = mock_registry_cls.return_value
    registry.get_job_ids.return_value = ["job-1", "job-2"]
    job_queue = MagicMock()
    job_queue.name = "strength_rank"
    connection = MagicMock()

    requeued = worker.requeue_failed_jobs(job_queue, connection)

    assert requeued == 2
    mock_registry_cls.assert_called_once_with("strength_rank", connection=connection)
    assert [c.args[0] for c in registry.requeue.call_args_list] == ["job-1", "job-2"]


@patch('strength_rank.worker.FailedJobRegistry')
def test_requeue_failed_jobs_with_empty_registry(mock_registry_cls):
    mock_registry_cls.return_value.get_job_ids.return_value = []

    assert worker.requeue_failed_jobs(MagicMock(), MagicMock()) == 0
    mock_registry_cls.return_value.requeue.assert_not_called()


@patch('strength_rank.worker.Worker')
@patch('strength_rank.worker.requeue_failed_jobs', return_value=0)
def test_run_worker_in_burst_mode(mock_requeue, mock_worker_cls):
    worker.run_worker(burst=True)

    mock_requeue.assert_called_once_with()
    mock_worker_cls.assert_called_once_with([worker.queue], connection=worker.redis_conn)
    mock_worker_cls.return_value.work.assert_called_once_with(with_scheduler=True, burst=True)
